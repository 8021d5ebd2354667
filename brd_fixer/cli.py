# -*- coding: utf-8 -*-

"""
Command-line interface for the BRD library fixer.
"""

import argparse
import logging
import sys
from typing import List, Optional

from brd_fixer.core.exceptions import MalformedDocument
from brd_fixer.core.services import RepairService
from brd_fixer.logging_config import setup_logging
from brd_fixer.version import get_app_version

EXIT_OK = 0
EXIT_MISSING_INPUT = 1
EXIT_MALFORMED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Merge duplicated libraries in an EAGLE .brd board so every footprint renders",
    )
    parser.add_argument("input", help="Board file to repair")
    parser.add_argument("-o", "--output", help="Output path (default: add _fixed suffix)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Print the summary only, not the processing log")
    parser.add_argument("--verbose", action="store_true", help="Show debug logging on the console")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_app_version()}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Configure logging, repair the board and print the result.
    """
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else None)

    service = RepairService()
    try:
        result = service.repair_file(args.input, args.output)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_MISSING_INPUT
    except MalformedDocument as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_MALFORMED

    if not args.quiet:
        print("\n".join(result.log))
    print(result.summary())
    if not result.changed:
        print("No duplicate libraries found - board copied unchanged.")

    logging.getLogger("brd_fixer").info("===== Repair finished =====")
    return EXIT_OK
