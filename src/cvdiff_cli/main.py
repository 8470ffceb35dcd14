"""
CLI main entry point for the CV comparison tool.

Thin wrapper around the core engine - no business logic here.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from cvdiff import CVComparator
from cvdiff.adapters import DocumentConversionError, document_from_snapshot
from cvdiff.alignment import alignment_from_name
from cvdiff.storage import FileStorage, StorageError

from .output import print_comparison_summary


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Compare an original CV snapshot against its rewritten version.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s original.json current.json
  %(prog)s original.json current.json -o ./reports
  %(prog)s original.json current.json --format csv
  %(prog)s original.json current.json --alignment position --threshold 0.4
        """,
    )

    parser.add_argument(
        "original_file",
        type=str,
        help="JSON file with the original CV snapshot",
    )

    parser.add_argument(
        "current_file",
        type=str,
        help="JSON file with the current (rewritten) CV snapshot",
    )

    parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default=".",
        help="Directory to save the report (default: current directory)",
    )

    parser.add_argument(
        "-f",
        "--format",
        type=str,
        choices=["csv", "json"],
        default="json",
        help="Report format (default: json)",
    )

    parser.add_argument(
        "-t",
        "--threshold",
        type=float,
        default=0.3,
        help="Bullet similarity threshold between 0 and 1 (default: 0.3)",
    )

    parser.add_argument(
        "-a",
        "--alignment",
        type=str,
        choices=["auto", "id", "position", "similarity"],
        default="auto",
        help="How experience and education entries are paired (default: auto)",
    )

    parser.add_argument(
        "--case-insensitive-skills",
        action="store_true",
        help="Compare skill names ignoring case and surrounding whitespace",
    )

    parser.add_argument(
        "--keep-hobbies",
        action="store_true",
        help="Keep hobby-like bullets in original experiences",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log alignment decisions to stderr",
    )

    return parser.parse_args(argv)


def read_snapshot(input_file: str) -> dict:
    """
    Read a JSON snapshot from file.

    Args:
        input_file: Path to input file

    Returns:
        Parsed JSON object

    Raises:
        SystemExit: If file cannot be read or is not valid JSON
    """
    file_path = Path(input_file)

    if not file_path.exists():
        print(f"Error: File not found: {input_file}", file=sys.stderr)
        sys.exit(1)

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading file {input_file}: {e}", file=sys.stderr)
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """
    Main CLI entry point.

    Orchestrates the entire CLI workflow:
    1. Parse arguments
    2. Read and convert both snapshots
    3. Run the comparison
    4. Display results
    5. Save the report to file
    """
    args = parse_arguments(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print(f"Reading snapshots from: {args.original_file}, {args.current_file}")
    original_data = read_snapshot(args.original_file)
    current_data = read_snapshot(args.current_file)

    try:
        original = document_from_snapshot(
            original_data, id_prefix="orig", filter_hobbies=not args.keep_hobbies
        )
        current = document_from_snapshot(
            current_data, id_prefix="curr", filter_hobbies=False, check_corruption=False
        )
    except DocumentConversionError as e:
        print(f"Error: Could not convert snapshot: {e}", file=sys.stderr)
        sys.exit(1)

    comparator = CVComparator(
        similarity_threshold=args.threshold,
        case_sensitive_skills=not args.case_insensitive_skills,
        experience_alignment=alignment_from_name(args.alignment, "experiences"),
        education_alignment=alignment_from_name(args.alignment, "education"),
    )

    print("Comparing documents...")
    result = comparator.compare(original, current)

    print_comparison_summary(result)

    print(f"\nSaving report to {args.format.upper()} file...")
    storage = FileStorage(output_directory=args.output_dir)

    try:
        output_path = storage.save(result, format=args.format)
        print(f"✓ Report saved to: {output_path}")
    except StorageError as e:
        print(f"✗ Failed to save report: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
