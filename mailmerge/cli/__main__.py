from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path

from dotenv import load_dotenv

from mailmerge.config.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    MailMergeConfig,
    apply_env_overrides,
    default_config,
    load_config,
)
from mailmerge.extraction.pipeline import EmptyTableError, parse_file_and_extract_emails
from mailmerge.logging.init import enable_debug, log_summary, setup_logging
from mailmerge.models.extraction_result import ExtractionOptions, ExtractionResult
from mailmerge.models.template import Template
from mailmerge.services.clipboard import ClipboardError, ClipboardWriter, TkClipboardWriter
from mailmerge.services.sent_status import SentStatusTracker
from mailmerge.services.session import ReviewSession
from mailmerge.services.summary import render_detected_column, render_summary_line
from mailmerge.services.template import TemplateRepository
from mailmerge.storage.kv_store import JsonFileStore, StorageError
from mailmerge.table.reader import TableDecodeError, UnsupportedFileTypeError

"""CLI entrypoint.

Commands:
- extract  : CSV/TSV -> email list + SUMMARY line
- review   : one-at-a-time review loop (copy / mark as sent / paging)
- template : show or save the subject/body template
- sent     : list or edit the persisted sent set

Exit codes: 0 = success (zero emails found is still success), 1 = fatal
(config / decode / empty file / storage).
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

CONFIG_PATH_ENV = "MAILMERGE_CONFIG"

# review ループのキー割り当て (Enter = 次へ)
KEY_BINDINGS = {
    "": "next",
    "n": "next",
    "p": "prev",
    "c": "copy_all",
    "ct": "copy_to",
    "cs": "copy_subject",
    "cb": "copy_body",
    "s": "toggle_sent",
    "?": "help",
    "q": "quit",
}

HELP_TEXT = (
    "Enter/n: next  p: prev  c: copy all  ct: copy To  cs: copy subject  "
    "cb: copy body  s: toggle sent  q: quit"
)


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv (.env wins over existing variables)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _add_option_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("file", type=Path, help="CSV (.csv) or TSV (.tsv) contacts export")
    p.add_argument("--keep-duplicates", action="store_true", help="Do not collapse repeated addresses")
    p.add_argument("--keep-invalid", action="store_true", help="Keep values that fail the format check")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="mail-merge", description="CSV/TSV contacts -> mail merge review")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=None, help=f"YAML config (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--store", type=Path, default=None, help="JSON store for template / sent status")
    sub = p.add_subparsers(dest="command", required=True)

    p_extract = sub.add_parser("extract", help="Print the extracted email list")
    _add_option_flags(p_extract)
    p_extract.add_argument("--json", action="store_true", help="Print the full result as JSON")

    p_review = sub.add_parser("review", help="Review addresses one at a time")
    _add_option_flags(p_review)
    p_review.add_argument("--unsent-only", action="store_true", help="Skip addresses already marked as sent")

    p_template = sub.add_parser("template", help="Show or save the template")
    tsub = p_template.add_subparsers(dest="template_command", required=True)
    tsub.add_parser("show", help="Print the saved template")
    t_save = tsub.add_parser("save", help="Save a template")
    t_save.add_argument("--subject", default="", help="Subject template")
    body = t_save.add_mutually_exclusive_group()
    body.add_argument("--body", default=None, help="Body template")
    body.add_argument("--body-file", type=Path, default=None, help="Read the body template from a file")

    p_sent = sub.add_parser("sent", help="Show or edit sent status")
    ssub = p_sent.add_subparsers(dest="sent_command", required=True)
    ssub.add_parser("list", help="Print addresses marked as sent")
    s_mark = ssub.add_parser("mark", help="Mark an address as sent")
    s_mark.add_argument("email")
    s_unmark = ssub.add_parser("unmark", help="Clear the sent mark of an address")
    s_unmark.add_argument("email")

    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> MailMergeConfig:
    """--config > $MAILMERGE_CONFIG > config/mailmerge.yml (if present) > defaults."""
    explicit = args.config or (Path(os.environ[CONFIG_PATH_ENV]) if os.getenv(CONFIG_PATH_ENV) else None)
    if explicit is not None:
        cfg = load_config(explicit)
    elif DEFAULT_CONFIG_PATH.exists():
        cfg = load_config(DEFAULT_CONFIG_PATH)
    else:
        cfg = default_config()
    return apply_env_overrides(cfg)


def _extraction_options(args: argparse.Namespace, cfg: MailMergeConfig) -> ExtractionOptions:
    # config の設定に CLI フラグ (--keep-*) を上書きで重ねる
    base = cfg.extraction_options
    return ExtractionOptions(
        remove_duplicates=base.remove_duplicates and not args.keep_duplicates,
        remove_invalid=base.remove_invalid and not args.keep_invalid,
    )


def _open_store(args: argparse.Namespace, cfg: MailMergeConfig) -> JsonFileStore:
    return JsonFileStore(args.store or Path(cfg.store_path))


def _load_and_extract(
    args: argparse.Namespace, cfg: MailMergeConfig, logger: logging.Logger
) -> ExtractionResult | None:
    logger.info(f"Reading contacts from: {args.file}")
    try:
        result = parse_file_and_extract_emails(args.file, _extraction_options(args, cfg))
    except (UnsupportedFileTypeError, TableDecodeError, EmptyTableError) as e:
        logger.error(f"file: {e}")
        return None
    logger.info(render_detected_column(result))
    # "SUMMARY " は log_summary 側で付与される
    log_summary(render_summary_line(result)[len("SUMMARY "):])
    return result


def _run_extract(args: argparse.Namespace, cfg: MailMergeConfig, logger: logging.Logger) -> int:
    result = _load_and_extract(args, cfg, logger)
    if result is None:
        return EXIT_FATAL
    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        for email in result.emails:
            print(email)
    return EXIT_SUCCESS


def _render_page(session: ReviewSession) -> None:
    message = session.compose()
    mark = " [sent]" if session.current_is_sent else ""
    print(f"--- {session.position_label()}{mark} ---")
    print(message.as_text())


def _copy(clipboard: ClipboardWriter, text: str, label: str, logger: logging.Logger) -> None:
    try:
        clipboard.write(text)
    except ClipboardError as e:
        logger.error(f"copy failed: {e}")
        return
    logger.info(f"copied: {label}")


def _review_loop(
    session: ReviewSession,
    clipboard: ClipboardWriter,
    input_fn: Callable[[str], str],
    logger: logging.Logger,
) -> None:
    _render_page(session)
    while True:
        try:
            raw = input_fn("> ")
        except EOFError:
            break
        action = KEY_BINDINGS.get(raw.strip().lower())
        if action is None:
            print(f"unknown command: {raw.strip()} (? for help)")
            continue
        if action == "quit":
            break
        if action == "help":
            print(HELP_TEXT)
            continue

        if action in ("next", "prev"):
            if not session.go_to_page(action):
                logger.info("no unsent emails")
                continue
            _render_page(session)
        elif action == "toggle_sent":
            state = session.toggle_sent()
            logger.info(f"{session.current_email}: {'sent' if state else 'unsent'}")
            _render_page(session)
        else:
            message = session.compose()
            texts = {
                "copy_all": (message.as_text(), "all"),
                "copy_to": (message.to, "To"),
                "copy_subject": (message.subject, "subject"),
                "copy_body": (message.body, "body"),
            }
            text, label = texts[action]
            _copy(clipboard, text, label, logger)


def _run_review(
    args: argparse.Namespace,
    cfg: MailMergeConfig,
    logger: logging.Logger,
    input_fn: Callable[[str], str],
    clipboard: ClipboardWriter,
) -> int:
    result = _load_and_extract(args, cfg, logger)
    if result is None:
        return EXIT_FATAL
    if not result.emails:
        logger.info("no emails to review")
        return EXIT_SUCCESS

    store = _open_store(args, cfg)
    template = TemplateRepository(store).load() or Template()
    session = ReviewSession(
        result,
        template,
        SentStatusTracker(store),
        show_unsent_only=cfg.show_unsent_only or args.unsent_only,
    )
    if session.show_unsent_only and session.current_is_sent:
        # 先頭が送信済みなら最初の未送信まで進める
        first = session.find_next_unsent(session.current_index, "next")
        if first is None:
            logger.info("no unsent emails")
            return EXIT_SUCCESS
        session.current_index = first
    _review_loop(session, clipboard, input_fn, logger)
    logger.info(f"sent {session.sent_count}/{len(session.emails)}")
    return EXIT_SUCCESS


def _run_template(args: argparse.Namespace, cfg: MailMergeConfig, logger: logging.Logger) -> int:
    repo = TemplateRepository(_open_store(args, cfg))
    if args.template_command == "show":
        template = repo.load()
        if template is None:
            logger.info("no saved template")
            return EXIT_SUCCESS
        print(f"Subject: {template.subject}\n\n{template.body}")
        return EXIT_SUCCESS

    if args.body_file is not None:
        try:
            body = args.body_file.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"template: cannot read body file: {e}")
            return EXIT_FATAL
    else:
        body = args.body or ""
    repo.save(Template(subject=args.subject, body=body))
    logger.info("template saved")
    return EXIT_SUCCESS


def _run_sent(args: argparse.Namespace, cfg: MailMergeConfig, logger: logging.Logger) -> int:
    tracker = SentStatusTracker(_open_store(args, cfg))
    if args.sent_command == "list":
        for email in sorted(tracker.get_sent_emails()):
            print(email)
        return EXIT_SUCCESS
    if args.sent_command == "mark":
        tracker.mark_as_sent(args.email)
        logger.info(f"{args.email.lower()}: sent")
    else:
        tracker.mark_as_unsent(args.email)
        logger.info(f"{args.email.lower()}: unsent")
    return EXIT_SUCCESS


def main(
    argv: list[str] | None = None,
    *,
    input_fn: Callable[[str], str] | None = None,
    clipboard: ClipboardWriter | None = None,
) -> int:
    logger = setup_logging()

    # NOTE: [] が渡された場合に sys.argv[1:] を読まないよう None のときのみ参照
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        enable_debug(logger)
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        if args.command == "extract":
            return _run_extract(args, cfg, logger)
        if args.command == "review":
            return _run_review(
                args,
                cfg,
                logger,
                input_fn=input_fn or input,
                clipboard=clipboard or TkClipboardWriter(),
            )
        if args.command == "template":
            return _run_template(args, cfg, logger)
        return _run_sent(args, cfg, logger)
    except StorageError as e:
        logger.error(f"storage: {e}")
        return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
