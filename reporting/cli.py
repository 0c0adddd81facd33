#!/usr/bin/env python3
"""
CLI for market study valuations and PDF reports.

Usage:
    python -m reporting.cli valuate <study_json>
    python -m reporting.cli report <study_json> [-o output.pdf]
    python -m reporting.cli sample

Examples:
    # Print the valuated study as JSON
    python -m reporting.cli valuate studies/jardins.json

    # Generate a PDF report from a study file
    python -m reporting.cli report studies/jardins.json -o reports/jardins.pdf

    # Generate a sample report for testing
    python -m reporting.cli sample
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from core.market_study import MarketStudy, ValuationError, ValuationService, build_market_study
from utils.config import Config
from utils.logging import setup_logging

from .pdf_generator import generate_report
from .sample_data import create_sample_study_data


def load_study_file(path: Path) -> Optional[dict]:
    """Read a study JSON file, printing an error and returning None on failure."""
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}", file=sys.stderr)
        return None


def build_study(data: dict, config: Config) -> Optional[MarketStudy]:
    """Valuate study data, printing an error and returning None on invalid input."""
    try:
        return build_market_study(data, ValuationService.from_config(config), config.currency)
    except ValuationError as e:
        print(f"Error: Invalid study data: {e}", file=sys.stderr)
        return None


def _split_output(output: Optional[str], config: Config):
    if not output:
        return Path(config.reports_dir), None
    path = Path(output)
    return path.parent, path.name


def cmd_valuate(args, config: Config) -> int:
    """Valuate a study file and print the result as JSON."""
    data = load_study_file(Path(args.study_file))
    if data is None:
        return 1

    study = build_study(data, config)
    if study is None:
        return 1

    print(json.dumps(study.to_dict(), indent=2, ensure_ascii=False))
    return 0


def cmd_report(args, config: Config) -> int:
    """Generate a PDF report from a study file."""
    input_path = Path(args.study_file)
    data = load_study_file(input_path)
    if data is None:
        return 1

    print(f"Loading study from: {input_path}")
    study = build_study(data, config)
    if study is None:
        return 1

    output_dir, filename = _split_output(args.output, config)
    result = generate_report(study, output_dir=output_dir, filename=filename)

    print(f"Report generated: {result.path}")
    print(f"Recommended value: {study.recommended_valuation.total_value.format()}")
    return 0


def cmd_sample(args, config: Config) -> int:
    """Generate a sample market study report for testing."""
    print("Generating sample market study report...")

    study = build_study(create_sample_study_data(), config)
    if study is None:
        return 1

    output_dir, filename = _split_output(args.output, config)
    result = generate_report(study, output_dir=output_dir, filename=filename)

    print(f"Report generated: {result.path}")
    return 0


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Market Study Valuation Engine - comparative method valuations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m reporting.cli valuate studies/jardins.json
    python -m reporting.cli report studies/jardins.json -o reports/jardins.pdf
    python -m reporting.cli sample

Output:
    Reports are saved to $REPORTS_DIR (default: ./reports)
        """,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    valuate_parser = subparsers.add_parser(
        "valuate",
        help="Valuate a study JSON file and print the result",
    )
    valuate_parser.add_argument("study_file", help="Path to JSON study file")
    valuate_parser.set_defaults(func=cmd_valuate)

    report_parser = subparsers.add_parser(
        "report",
        help="Generate a PDF report from a study JSON file",
    )
    report_parser.add_argument("study_file", help="Path to JSON study file")
    report_parser.add_argument("-o", "--output", help="Output PDF path")
    report_parser.set_defaults(func=cmd_report)

    sample_parser = subparsers.add_parser(
        "sample",
        help="Generate a sample report with demo data",
    )
    sample_parser.add_argument("-o", "--output", help="Output PDF path")
    sample_parser.set_defaults(func=cmd_sample)

    args = parser.parse_args(argv)

    config = Config.load()
    setup_logging(config.log_level, config.log_format)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
