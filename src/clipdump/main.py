#!/usr/bin/env python3

import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from clipdump.clipboard import get_accessor
from clipdump.config import DumpSettings, settings_from_env
from clipdump.errors import ClipboardUnavailable
from clipdump.services.dump_service import DumpService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNAVAILABLE = 1
EXIT_CONFIG = 2


def parse_args(argv: Optional[List[str]] = None, defaults: Optional[DumpSettings] = None) -> argparse.Namespace:
    defaults = defaults or DumpSettings()
    parser = argparse.ArgumentParser(
        prog="clipdump",
        description="clipdump - Dump every format currently on the system clipboard"
    )

    parser.add_argument(
        "-m", "--max-preview-bytes",
        type=int,
        default=defaults.max_preview_bytes,
        help="Bytes shown in hex previews of binary and image formats (default: %(default)s)"
    )

    parser.add_argument(
        "-t", "--timeout",
        type=float,
        default=defaults.command_timeout,
        help="Timeout in seconds for each clipboard tool call on Linux (default: %(default)s)"
    )

    parser.add_argument(
        "-b", "--backend",
        choices=["auto", "wayland", "x11"],
        default=defaults.linux_backend,
        help="Linux clipboard backend (default: %(default)s)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose debug logging"
    )

    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> DumpSettings:
    return DumpSettings(
        max_preview_bytes=args.max_preview_bytes,
        command_timeout=args.timeout,
        linux_backend=args.backend,
        verbose=args.verbose,
    )


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    logging.basicConfig(level=logging.WARNING, format='%(levelname)s: %(message)s')

    try:
        args = parse_args(argv, defaults=settings_from_env())
        settings = build_settings(args)
    except ValidationError as e:
        print(f"clipdump: invalid configuration:\n{e}", file=sys.stderr)
        return EXIT_CONFIG

    if settings.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        accessor = get_accessor(settings)
        DumpService(accessor, settings=settings).run()
    except ClipboardUnavailable as e:
        logger.error(f"Clipboard unavailable: {e}")
        return EXIT_UNAVAILABLE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
