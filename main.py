#!/usr/bin/env python3
"""
Invoice Text Parser - Main Entry Point.

Command-line tool for running the extraction pipeline over OCR text
dumps or digital PDFs and inspecting the structured result. It does
no vendor lookup and no persistence; it prints (or writes) JSON.

Usage:
    Command Line:
        python main.py --input invoice.txt
        python main.py --input ./invoices/ --output results.json --trace

    Python:
        from main import run_extraction
        results = run_extraction("invoice.txt")

Author: ML Engineering Team
Version: 1.0.0
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, List, Dict, Any

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import project modules
from config import ConfigurationManager, load_config
from invoice_parser.utils.logger import (
    ROOT_LOGGER_NAME,
    get_logger,
    set_level,
    setup_logger_from_config,
)
from invoice_parser.utils.helpers import ensure_directory
from invoice_parser.utils.exceptions import InputError


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Invoice Text Parser",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Parse one OCR dump:
        python main.py --input invoice.txt

    Parse a directory and keep the strategy trace:
        python main.py --input ./invoices/ --output results.json --trace
        """
    )

    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Input .txt/.pdf file or directory containing them"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Write the JSON results to this file instead of stdout"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    parser.add_argument(
        "--trace",
        action="store_true",
        help="Include the per-field strategy trace in the output"
    )

    # Logging options
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    config = load_config(args.config)

    logger = setup_logger_from_config()

    if args.debug:
        set_level(logging.DEBUG)
    elif args.quiet:
        set_level(logging.WARNING)

    logger.info("=" * 60)
    logger.info("INVOICE TEXT PARSER")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {args.input}")

    return config


def run_extraction(
    input_path: str,
    include_trace: bool = False
) -> List[Dict[str, Any]]:
    """
    Run the extraction pipeline over a file or directory.

    Files that cannot be loaded are reported and skipped.

    Args:
        input_path: Path to input file or directory.
        include_trace: Add the strategy trace to each result.

    Returns:
        List of result dictionaries, each with its "source_file".

    Raises:
        InputError: If the input path doesn't exist.

    Example:
        >>> results = run_extraction("invoices/")
        >>> for r in results:
        ...     print(r['invoice_number'])
    """
    logger = get_logger(__name__)

    from invoice_parser.input_handler import InputHandler
    from invoice_parser.extraction import InvoiceExtractor

    input_handler = InputHandler()
    extractor = InvoiceExtractor()

    path = Path(input_path)
    if path.is_dir():
        loaded = input_handler.load_batch(path)
    else:
        if not path.exists():
            raise InputError(f"Input path not found: {path}")
        loaded = [input_handler.load(path)]

    results = []
    for document in loaded:
        if not document.success:
            logger.warning(f"Skipped {document.filename}: {document.error}")
            continue

        extraction = extractor.extract(document.text)
        data = {'source_file': document.filepath}
        data.update(extraction.to_dict(include_trace=include_trace))
        results.append(data)

        logger.info(
            f"  {document.filename}: invoice #{extraction.invoice_number or 'N/A'}, "
            f"total {extraction.total_amount:.2f}, {len(extraction.items)} item(s)"
        )

    return results


def write_results(results: List[Dict[str, Any]], output: Optional[str]) -> None:
    """
    Write results as a JSON array.

    Args:
        results: Result dictionaries.
        output: File path, or None for stdout.
    """
    payload = json.dumps(results, indent=2, ensure_ascii=False)

    if output is None:
        print(payload)
        return

    output_path = Path(output)
    ensure_directory(output_path.parent)
    output_path.write_text(payload + "\n", encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 for success, 1 for errors, 130 when interrupted).
    """
    try:
        args = parse_arguments(argv)

        initialize_system(args)
        logger = get_logger(__name__)

        results = run_extraction(args.input, include_trace=args.trace)

        if not results:
            logger.error("No input could be processed")
            return 1

        write_results(results, args.output)

        logger.info("=" * 60)
        logger.info(f"Extraction complete. Processed {len(results)} file(s).")
        logger.info("=" * 60)

        return 0

    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130

    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if logging.getLogger(ROOT_LOGGER_NAME).isEnabledFor(logging.DEBUG):
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
