#!/usr/bin/env python3
"""
Grundbuch .gbx Reviewer — Entry Point
======================================

Decodes a .gbx file, reviews the register sheet and prints a report.

Usage:
    python main.py sheet.gbx                 # colored review report
    python main.py sheet.gbx --normalize     # canonical minimal JSON on stdout
    GBX_LOG_LEVEL=DEBUG python main.py sheet.gbx
"""

from __future__ import annotations

import argparse
import logging
import sys

from grundbuch_format.codec import dumps, read_gbx
from grundbuch_format.config import get_settings
from grundbuch_format.exceptions import GrundbuchFormatError
from grundbuch_format.report import ReviewFinding, ReviewReport, Severity
from grundbuch_format.review import review_document

# ─── Load .env if available (optional dependency) ────────────────────
try:
    from dotenv import load_dotenv

    load_dotenv()
except ImportError:
    pass


# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72


# ─── Pretty Printer Helpers ─────────────────────────────────────────


def _print_sheet_details(report: ReviewReport) -> None:
    """Print title block, sections and parcel area."""
    tb = report.titelblatt
    print(f"  Amtsgericht: {tb.amtsgericht}")
    print(f"  Grundbuch:   {tb.grundbuch_von}")
    print(f"  Blatt:       {_BOLD}{tb.blatt}{_RESET}")
    print(f"  Digitalisiert: {'ja' if report.digitalisiert else 'nein'} ({report.seiten} Seite(n))")
    for s in report.sections:
        redacted = f" {_DIM}({s.geroetet} gerötet){_RESET}" if s.geroetet else ""
        print(f"    {s.section:<36} {s.total:>4}{redacted}")
    print(
        f"  Fläche:      {report.flaeche_ha or '0'} ha {report.flaeche_a or '0'} a "
        f"{report.flaeche_rest_m2} m²  {_DIM}({report.flaeche_m2} m²){_RESET}"
    )


# Register sections in the order they appear on the sheet.
_SECTION_TITLES = {
    "bestandsverzeichnis": "Bestandsverzeichnis",
    "abt1": "Abteilung I (Eigentümer)",
    "abt2": "Abteilung II (Lasten und Beschränkungen)",
    "abt3": "Abteilung III (Grundpfandrechte)",
}

_SEVERITY_STYLE = {
    Severity.ERROR: (_RED, "FEHLER"),
    Severity.WARNING: (_YELLOW, "WARNUNG"),
    Severity.INFO: (_CYAN, "HINWEIS"),
}


def _split_path(path: str) -> tuple[str, str]:
    """``"abt2.eintraege[0]"`` -> ``("abt2", "eintraege[0]")``."""
    section, _, record = path.partition(".")
    return section, record


def _print_findings_by_section(report: ReviewReport) -> None:
    """Print findings under the register section their record belongs to."""
    by_section: dict[str, list[ReviewFinding]] = {}
    for f in report.findings:
        by_section.setdefault(_split_path(f.field)[0], []).append(f)

    blatt = report.titelblatt.blatt
    for section, title in _SECTION_TITLES.items():
        findings = by_section.get(section)
        if not findings:
            continue
        print(f"\n  {_BOLD}Blatt {blatt} / {title}{_RESET}")
        for f in sorted(findings, key=lambda f: list(Severity).index(f.severity)):
            color, label = _SEVERITY_STYLE[f.severity]
            record = _split_path(f.field)[1]
            print(f"    {color}{label:<8}{_RESET} {record:<28} {_DIM}[{f.code}]{_RESET}")
            print(f"             {f.message}")
            if f.details:
                context = ", ".join(f"{k}={v}" for k, v in f.details.items())
                print(f"             {_DIM}{context}{_RESET}")
    print()


# ─── Pretty Printer ─────────────────────────────────────────────────


def print_report(report: ReviewReport) -> int:
    """Pretty-print the review report with ANSI color codes.

    Returns:
        0 if the sheet is consistent, 1 otherwise.
    """
    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  GRUNDBUCH REVIEW REPORT{_RESET}")
    print(f"{'=' * _WIDTH}")
    _print_sheet_details(report)
    print(f"{'─' * _WIDTH}")

    errors = [f for f in report.findings if f.severity == Severity.ERROR]
    _print_findings_by_section(report)

    print(f"{'=' * _WIDTH}")
    if report.is_consistent:
        print(f"  {_GREEN}{_BOLD}SHEET IS CONSISTENT{_RESET}")
    else:
        print(f"  {_RED}{_BOLD}SHEET INCONSISTENT  --  {len(errors)} error(s) found{_RESET}")
    print(f"{'=' * _WIDTH}\n")

    return 0 if report.is_consistent else 1


# ─── Main ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Review or normalize a Grundbuch .gbx exchange file.",
    )
    parser.add_argument("path", help="Path to the .gbx file")
    parser.add_argument(
        "--normalize",
        action="store_true",
        help="Print the canonical minimal encoding instead of a report",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Decode the file, then print either the report or the canonical JSON."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        pdf = read_gbx(args.path)
    except GrundbuchFormatError as exc:
        print(f"{_RED}[{exc.code}]{_RESET} {exc}", file=sys.stderr)
        for err in exc.details.get("errors", [])[:10]:
            loc = ".".join(str(p) for p in err["loc"])
            print(f"  {_DIM}{loc}: {err['msg']}{_RESET}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"{_RED}Cannot read {args.path}: {exc}{_RESET}", file=sys.stderr)
        return 2

    if args.normalize:
        print(dumps(pdf, indent=settings.indent))
        return 0

    return print_report(review_document(pdf))


if __name__ == "__main__":
    sys.exit(main())
