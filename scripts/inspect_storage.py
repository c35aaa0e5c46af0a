"""
Diagnostic runner for saved patrol settings strings.

Decodes a saved string, prints the load log and the resulting
wire document.

Usage:
    python scripts/inspect_storage.py saved.txt
    python scripts/inspect_storage.py < saved.txt
    python scripts/inspect_storage.py --reset
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from patrol.storage import SettingsStore, print_log


def _read_text(path: Optional[str]) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as handle:
        return handle.read()


def _print_document(label: str, document: Optional[dict]) -> None:
    print(f"\n[{label}]")
    print(json.dumps(document, indent=2, sort_keys=True))


def run(text: Optional[str], reset: bool = False) -> int:
    store = SettingsStore()

    if reset:
        result = store.reset()
        print_log(result.log, "reset")
    else:
        result = store.decode(text)
        print_log(result.log, "decode")

    saved = store.save()
    if not saved.ok:
        print_log(saved.log, "save")
        return 1

    _print_document("wire-document", saved.document)
    return 0 if all(entry.expected for entry in result.log) else 2


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="File holding the saved string (stdin when omitted or '-').",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Ignore input and print the default document.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Also show debug output from the storage engine.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    text = None if args.reset else _read_text(args.path)
    return run(text, reset=args.reset)


if __name__ == "__main__":
    sys.exit(main())
