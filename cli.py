"""
Pay Stub Extractor command line

Usage:
  paystub-extract --directory ./input --output output.xls
  paystub-extract -d ./input -f stub.pdf --strategy position-index -o out.json
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from config.extraction_config import EXTRACTION_CONFIG
from services.errors import PayDataError
from services.pay_data_service import PayDataService
from services.pay_files import identify_pay_files
from services.writers.pay_data_writer import get_output_path, write_pay_data

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paystub-extract",
        description="Extract pay data from pay stub PDFs into a spreadsheet or JSON file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-d", "--directory", default=os.path.join(os.getcwd(), "input"),
        help="directory holding the pay stub PDFs (default: ./input)",
    )
    parser.add_argument("-f", "--file", help="single file name inside --directory")
    parser.add_argument(
        "-p", "--file-pattern",
        help="regex a file path must match to be processed",
    )
    parser.add_argument(
        "--file-pattern-flags", default="im",
        help="regex flag letters for --file-pattern (default: im)",
    )
    parser.add_argument(
        "--pdf-backend", default=EXTRACTION_CONFIG["pdf_backends"]["default"],
        choices=EXTRACTION_CONFIG["pdf_backends"]["available"],
    )
    parser.add_argument(
        "--strategy", default=EXTRACTION_CONFIG["strategies"]["default"],
        help=f"pay data extraction strategy: {', '.join(EXTRACTION_CONFIG['strategies']['available'])}",
    )
    parser.add_argument(
        "--rules", default=EXTRACTION_CONFIG["rules"]["default_path"],
        help="regex rules file path, or the rules JSON itself",
    )
    parser.add_argument(
        "-o", "--output", default=EXTRACTION_CONFIG["output"]["default_file"],
        help="output file (.json, .xls or .xlsx); a bare name goes in --directory",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def run(args: argparse.Namespace) -> str:
    """Identify, extract and write; returns the output path"""
    service = PayDataService(strategy=args.strategy, rules=args.rules, pdf_backend=args.pdf_backend)

    files = identify_pay_files(args.directory, args.file, args.file_pattern, args.file_pattern_flags)
    if not files:
        logger.warning(f"No pay stub files found in {args.directory}")

    records = service.extract_files(files)
    return write_pay_data(records, get_output_path(args.output, args.directory))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        output_path = run(args)
    except (PayDataError, OSError, ValueError) as e:
        logger.error(f"Pay data extraction failed: {e}")
        return 1

    print(f"Pay data written to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
