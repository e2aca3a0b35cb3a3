# Shared pytest fixtures
from __future__ import annotations
import logging
import tempfile
from pathlib import Path
import pytest

from mailmerge.logging.init import LOGGER_NAME, reset_logging
from mailmerge.storage.kv_store import MemoryStore


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("MAILMERGE_CONFIG", raising=False)
        monkeypatch.delenv("MAILMERGE_STORE_PATH", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    # ロガーは capsys 差し替え後の sys.stdout に毎回バインドし直す
    reset_logging()
    yield
    reset_logging()
    # setup_logging() が外した伝播を戻す (caplog 用)
    app_logger = logging.getLogger(LOGGER_NAME)
    for h in app_logger.handlers[:]:
        app_logger.removeHandler(h)
    app_logger.propagate = True
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture()
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def google_contacts_csv() -> str:
    return (
        "Name,Organization 1 - Name,E-mail 1 - Value\n"
        "Alice,Acme,alice@example.com\n"
        "Bob,Globex,BOB@Example.com\n"
        "\n"
        "Carol,Initech,not-an-email\n"
        "Dave,Acme,\n"
        "Bob again,Globex,bob@example.com\n"
    )


@pytest.fixture()
def write_table(temp_workdir: Path):
    def _write(name: str, text: str) -> Path:
        p = temp_workdir / "data" / name
        p.write_text(text, encoding="utf-8")
        return p
    return _write


@pytest.fixture()
def sample_config_yaml() -> str:
    return """remove_duplicates: true
remove_invalid: true
show_unsent_only: false
store_path: ./state/store.json
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "mailmerge.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
