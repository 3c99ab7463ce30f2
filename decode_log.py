"""
Command-line access to the telemetry log pipeline.

Usage:
    python decode_log.py summary LOG_FILE [--settings FILE]
    python decode_log.py decode LOG_FILE [--output FILE]
    python decode_log.py csv LOG_FILE [--output FILE]
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from mareelog import constants
from mareelog.errors import LogFormatError
from mareelog.export import decode_log_text, export_rows_csv
from mareelog.session import build_session
from mareelog.settings import load_settings


def read_log(path: Path) -> str:
    with path.open("r", encoding="utf-8", newline="") as file:
        return file.read()


def write_output(text: str, output) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        print(f"Saved to: {output}")
    else:
        sys.stdout.write(text)


def print_summary(summary: dict) -> None:
    print(f"\n{'='*60}")
    print(f"Rows:            {summary['row_count']} ({summary['pages']} page(s) of {summary['page_size']})")
    print(f"Start:           {summary['start_date'] or '-'}")
    print(f"End:             {summary['end_date'] or '-'}")
    print(f"Duration:        {summary['duration'] or '-'}")
    print(f"Distance:        {summary['distance_nm']:.3f} nm ({summary['distance_km']:.2f} km)")
    print(f"Direct distance: {summary['direct_distance_nm']:.3f} nm ({summary['direct_distance_km']:.2f} km)")
    print(f"Sensors ({summary['sensor_count']}):     {', '.join(summary['active_sensors']) or '-'}")
    print(f"{'='*60}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Decode and summarize refrigeration unit telemetry logs"
    )
    parser.add_argument(
        "command",
        choices=["summary", "decode", "csv"],
        help="'summary' prints trip statistics, 'decode' writes the decoded log, 'csv' writes normalized rows"
    )
    parser.add_argument("log_file", type=str, help="Path to the device log file")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file for 'decode' and 'csv' (default: stdout)"
    )
    parser.add_argument(
        "--settings",
        type=str,
        default=str(constants.SETTINGS_FILE),
        help="Chart settings JSON (default: chart_settings.json in the data directory)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the summary as JSON"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    log_path = Path(args.log_file)
    if not log_path.exists():
        print(f"Error: log file not found: {log_path}", file=sys.stderr)
        return 1

    try:
        text = read_log(log_path)
    except UnicodeDecodeError as exc:
        print(f"Error: {log_path.name} is not valid UTF-8: {exc}", file=sys.stderr)
        return 1

    if args.command == "decode":
        write_output(decode_log_text(text), args.output)
        return 0

    try:
        session = build_session(text, load_settings(args.settings))
    except LogFormatError as exc:
        print(f"Error: {log_path.name}: {exc}", file=sys.stderr)
        return 1

    if args.command == "csv":
        write_output(export_rows_csv(session["parsed"].rows), args.output)
    elif args.json:
        print(json.dumps(session["summary"], indent=2, ensure_ascii=False))
    else:
        print_summary(session["summary"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
