#!/usr/bin/env python3
"""Sample contacts generator for manual testing and the perf smoke test.

Generates a synthetic contacts export shaped like a Google Contacts CSV:
- Header row with "Name", "Organization 1 - Name", "E-mail 1 - Value", ...
- Data rows mixing valid addresses, case-variant duplicates, malformed
  values and empty cells

The output suffix decides the delimiter (.csv -> comma, .tsv -> tab).
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

DOMAINS = ["example.com", "example.org", "mail.example.net", "corp.example.jp"]
ORGANIZATIONS = ["Acme", "Globex", "Initech", "Umbrella", "Hooli", ""]


def generate_contacts(
    rows: int,
    seed: int = 42,
    duplicate_ratio: float = 0.1,
    invalid_ratio: float = 0.05,
    empty_ratio: float = 0.05,
    email_header: str = "E-mail 1 - Value",
) -> pd.DataFrame:
    """Generate a contacts DataFrame.

    Args:
        rows: Number of data rows
        seed: Random seed for reproducible data
        duplicate_ratio: Share of rows re-using an earlier address (upper-cased)
        invalid_ratio: Share of rows with a malformed address
        empty_ratio: Share of rows with an empty email cell
        email_header: Header name of the email column

    Returns:
        DataFrame with string cells only
    """
    rng = np.random.default_rng(seed)

    names = [f"Contact {i + 1}" for i in range(rows)]
    emails: list[str] = []
    kinds = rng.choice(
        ["valid", "duplicate", "invalid", "empty"],
        size=rows,
        p=[1 - duplicate_ratio - invalid_ratio - empty_ratio, duplicate_ratio, invalid_ratio, empty_ratio],
    )
    for i, kind in enumerate(kinds):
        if kind == "duplicate" and emails:
            earlier = [e for e in emails if "@" in e and " " not in e]
            if earlier:
                emails.append(str(rng.choice(earlier)).upper())
                continue
        if kind == "invalid":
            emails.append(f"contact{i + 1} at {rng.choice(DOMAINS)}")
        elif kind == "empty":
            emails.append("")
        else:
            emails.append(f"contact{i + 1}@{rng.choice(DOMAINS)}")

    return pd.DataFrame(
        {
            "Name": names,
            "Organization 1 - Name": rng.choice(ORGANIZATIONS, size=rows).tolist(),
            email_header: emails,
            "Notes": ["" for _ in range(rows)],
        }
    )


def write_contacts(df: pd.DataFrame, output_path: Path) -> None:
    sep = "\t" if output_path.suffix.lower() == ".tsv" else ","
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, sep=sep, index=False)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic contacts export (CSV/TSV)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 1,000 contacts as CSV
  %(prog)s contacts.csv --rows 1000

  # TSV with a generic "Email" header (forces content-based detection)
  %(prog)s contacts.tsv --email-header Email
        """,
    )
    parser.add_argument("output", type=Path, help="Output file path (.csv or .tsv)")
    parser.add_argument("--rows", type=int, default=1_000, help="Number of data rows (default: 1,000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--duplicates", type=float, default=0.1, help="Duplicate ratio (default: 0.1)")
    parser.add_argument("--invalid", type=float, default=0.05, help="Invalid ratio (default: 0.05)")
    parser.add_argument("--empty", type=float, default=0.05, help="Empty ratio (default: 0.05)")
    parser.add_argument("--email-header", default="E-mail 1 - Value", help="Email column header")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.output.suffix.lower() not in (".csv", ".tsv"):
        print("Error: output must end with .csv or .tsv", file=sys.stderr)
        return 1
    if args.duplicates + args.invalid + args.empty >= 1:
        print("Error: ratios must sum to less than 1", file=sys.stderr)
        return 1

    df = generate_contacts(args.rows, args.seed, args.duplicates, args.invalid, args.empty, args.email_header)
    write_contacts(df, args.output)
    print(f"Created contacts file: {args.output}")
    print(f"  Rows: {args.rows:,}")
    print(f"  Email column: {args.email_header}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
