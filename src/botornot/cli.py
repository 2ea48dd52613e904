"""
Command-line interface for botornot.

Usage:
  botornot image.png                       # Default report
  botornot https://cdn.example/a.webp      # Analyze from URL
  botornot -q *.png                        # One line per file
  botornot --json image.png                # JSON to stdout
  botornot -o report.json *.jpg            # JSON export
  botornot --headers-only image.png        # Metadata fields and signatures only
"""

from __future__ import annotations

import argparse
import json
import sys

from botornot._version import __version__
from botornot.analyze import analyze_file, analyze_url, scan_headers
from botornot.errors import FetchError
from botornot.fetch import fetch_bytes, read_file
from botornot.formatters import (
    format_default,
    format_header_scan,
    format_json_list,
    format_quiet,
)
from botornot.logging import configure_logging
from botornot.models import AnalysisResult
from botornot.signatures import load_catalog
from botornot.utils import is_remote_url


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="botornot",
        description="Detect AI-generated images and video from metadata and pixel statistics.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  (default)       Verdict, signatures, pixel statistics and rationale
  -q/--quiet      One-line summary per input
  --json          JSON results on stdout
  --headers-only  Recovered metadata fields and signature matches, no score

Evidence control:
  --no-pixels     Skip pixel sampling (metadata and URL evidence only)

Configuration:
  ~/.botornot/config.yaml, or BOTORNOT_<SECTION>_<FIELD> environment variables
  (e.g. BOTORNOT_SCORING_DECISION_THRESHOLD=30)

Examples:
  botornot image.png
  botornot -q renders/*.png
  botornot -o report.json https://example.com/a.jpg b.png
        """,
    )
    parser.add_argument("inputs", nargs="+", metavar="FILE_OR_URL", help="Media file(s) or URL(s)")
    parser.add_argument("-o", "--output", help="Save results to JSON file")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Log parser and scorer steps to stderr")
    parser.add_argument(
        "--no-pixels",
        action="store_true",
        help="Skip pixel sampling",
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument("-q", "--quiet", action="store_true", help="Quick summary only")
    mode_group.add_argument("--json", action="store_true", help="Print JSON results")
    mode_group.add_argument(
        "--headers-only",
        action="store_true",
        help="Only parse headers and match signatures (no pixels, no score)",
    )
    return parser


def run_headers_only(args: argparse.Namespace) -> int:
    """Print header scans; returns the number of inputs that could not be read."""
    catalog = load_catalog()
    scans = []
    errors = 0

    for location in args.inputs:
        try:
            media = fetch_bytes(location) if is_remote_url(location) else read_file(location)
        except FetchError as e:
            print(f"Error: {e.reason}", file=sys.stderr)
            errors += 1
            continue
        scan = scan_headers(media, catalog)
        scans.append({"name": location, **scan.model_dump(mode="json")})
        if not args.output:
            print(format_header_scan(scan, location))
            print()

    if args.output and scans:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(scans, f, indent=2, ensure_ascii=False)
        print(f"Report saved to: {args.output}")
    return errors


def main(argv: list[str] | None = None) -> int:
    """Main entry point for botornot CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(debug=args.debug)

    if args.headers_only:
        return 1 if run_headers_only(args) else 0

    catalog = load_catalog()
    pixels = not args.no_pixels
    results: list[AnalysisResult] = []
    errors = 0

    for location in args.inputs:
        if is_remote_url(location):
            result = analyze_url(location, pixels=pixels, catalog=catalog)
        else:
            result = analyze_file(location, pixels=pixels, catalog=catalog)
        results.append(result)

        if not result.analyzed:
            errors += 1
            print(f"Error: {result.details[0]}", file=sys.stderr)

        if args.json:
            continue
        if args.quiet:
            print(format_quiet(result))
        else:
            print(format_default(result))
            print()

    if args.json:
        print(format_json_list(results))

    if args.output and results:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(format_json_list(results))
        print(f"Report saved to: {args.output}", file=sys.stderr if args.json else sys.stdout)

    return 1 if errors > 0 else 0


if __name__ == "__main__":
    sys.exit(main())
