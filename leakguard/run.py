"""Command-line entry point for LeakGuard.

Scans a file (or stdin) and prints which categories of sensitive data it
contains. Matched text is never printed.

Usage:
    python -m leakguard.run notes.txt
    leakguard-scan --messages conversation.json     # via pyproject.toml [project.scripts]
    cat prompt.txt | leakguard-scan --enable -

Output (stdout, one JSON object):
    {"sensitive": true, "categories": ["API Key"], "patterns": ["github-token"]}

Exit codes:
    0  no sensitive data found (or filter disabled)
    1  sensitive data found
    2  input could not be read or parsed
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import uuid
from typing import Optional, Sequence

from leakguard.config import load_config
from leakguard.config_store import ConfigKey, ConfigurationStore
from leakguard.messages import extract_text_from_messages, get_unique_categories
from leakguard.service.factory import create_filter_service
from leakguard.utils.logger import (
    PerformanceLogger,
    clear_scan_id,
    configure_logging,
    get_logger,
    set_scan_id,
)

logger = get_logger(__name__)

EXIT_CLEAN = 0
EXIT_SENSITIVE = 1
EXIT_INPUT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="leakguard-scan",
        description="Report categories of sensitive data found in text.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default="-",
        help="File to scan; '-' or omitted reads stdin",
    )
    parser.add_argument("-c", "--config", help="Path to a LeakGuard config.yaml")
    parser.add_argument(
        "--messages",
        action="store_true",
        help="Treat input as a JSON list of chat messages",
    )
    parser.add_argument(
        "--enable",
        action="store_true",
        help="Scan even if the config leaves the filter disabled",
    )
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument(
        "--console-logs",
        action="store_true",
        help="Human-readable logs instead of JSON (logs go to stderr)",
    )
    return parser


def read_input(path: str, as_messages: bool) -> str:
    """Read the scan input.

    Raises:
        OSError:    File unreadable.
        ValueError: ``as_messages`` and the input is not a JSON list.
    """
    if path == "-":
        raw = sys.stdin.read()
    else:
        with open(path, encoding="utf-8", errors="replace") as fh:
            raw = fh.read()

    if not as_messages:
        return raw

    messages = json.loads(raw)
    if not isinstance(messages, list):
        raise ValueError("messages input must be a JSON list")
    return extract_text_from_messages(messages)


async def scan_input(text: str, store: ConfigurationStore) -> dict:
    service = create_filter_service(store)
    try:
        with PerformanceLogger("scan", logger):
            matches = await service.check_for_sensitive_data(text)
    finally:
        service.close()

    return {
        "sensitive": bool(matches),
        "categories": get_unique_categories(matches),
        "patterns": [match.pattern_name for match in matches],
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one scan and print the JSON summary.

    Raises:
        SystemExit: Propagated from load_config() on config errors.
    """
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    configure_logging(
        log_level=args.log_level or config.log_level,
        json_output=not args.console_logs,
    )
    store = ConfigurationStore.from_config(config)
    if args.enable:
        store.set(ConfigKey.ENABLED, True)

    set_scan_id(uuid.uuid4().hex[:16])
    try:
        try:
            text = read_input(args.path, args.messages)
        except (OSError, ValueError) as exc:
            # json.JSONDecodeError is a ValueError
            logger.error("Could not read scan input", path=args.path, error=str(exc))
            return EXIT_INPUT_ERROR

        summary = asyncio.run(scan_input(text, store))
    finally:
        clear_scan_id()

    print(json.dumps(summary))
    return EXIT_SENSITIVE if summary["sensitive"] else EXIT_CLEAN


if __name__ == "__main__":
    sys.exit(main())
