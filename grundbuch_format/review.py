"""
Consistency review of a decoded register sheet.

Each check:
  - Takes a decoded document
  - Returns a list of ReviewFinding objects (empty = all clear)
  - Never modifies the document

The review surfaces questionable data; it does not fix it. In
particular a manual redaction flag that contradicts the detector is
reported, not cleared: the manual flag keeps winning.

review_document() runs every check and adds per-section summaries.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterator

from .area import GroesseMetrisch
from .document import PdfFile
from .grundbuch import BvEintragFlurstueck, Eintragung, Grundbuch
from .report import ReviewFinding, ReviewReport, SectionSummary, Severity

logger = logging.getLogger(__name__)

# (section attribute, list attribute) in document order
RECORD_LISTS: tuple[tuple[str, str], ...] = (
    ("bestandsverzeichnis", "eintraege"),
    ("bestandsverzeichnis", "zuschreibungen"),
    ("bestandsverzeichnis", "abschreibungen"),
    ("abt1", "eintraege"),
    ("abt1", "grundlagen_eintragungen"),
    ("abt1", "veraenderungen"),
    ("abt1", "loeschungen"),
    ("abt2", "eintraege"),
    ("abt2", "veraenderungen"),
    ("abt2", "loeschungen"),
    ("abt3", "eintraege"),
    ("abt3", "veraenderungen"),
    ("abt3", "loeschungen"),
)


def iter_records(grundbuch: Grundbuch) -> Iterator[tuple[str, Eintragung]]:
    """Yield ``(path, record)`` for every record, e.g. ``("abt2.eintraege[0]", ...)``."""
    for section_name, list_name in RECORD_LISTS:
        records = getattr(getattr(grundbuch, section_name), list_name)
        for index, record in enumerate(records):
            yield f"{section_name}.{list_name}[{index}]", record


# ─── Orchestrator ────────────────────────────────────────────────────


def review_document(pdf: PdfFile) -> ReviewReport:
    """Run all checks and summarize the register sheet."""
    grundbuch = pdf.analysiert

    findings: list[ReviewFinding] = []
    findings.extend(check_redaction_conflicts(grundbuch))
    findings.extend(check_empty_bookings(grundbuch))
    findings.extend(check_duplicate_lfd_nr(grundbuch))
    findings.extend(check_page_references(pdf))

    total_m2 = active_parcel_area(grundbuch)
    area = GroesseMetrisch.from_m2(total_m2)

    report = ReviewReport(
        titelblatt=grundbuch.titelblatt,
        is_consistent=not any(f.severity == Severity.ERROR for f in findings),
        digitalisiert=pdf.digitalisiert,
        seiten=len(pdf.hocr.seiten),
        sections=summarize_sections(grundbuch),
        flaeche_m2=total_m2,
        flaeche_ha=area.hectares_string(),
        flaeche_a=area.ares_string(),
        flaeche_rest_m2=area.square_meters_string(),
        findings=findings,
    )
    logger.info(
        "Reviewed %s: %d finding(s)", grundbuch.titelblatt.blatt, len(findings)
    )
    return report


# ─── Summaries ───────────────────────────────────────────────────────


def summarize_sections(grundbuch: Grundbuch) -> list[SectionSummary]:
    """Count records and redacted records per non-empty list."""
    summaries: list[SectionSummary] = []
    for section_name, list_name in RECORD_LISTS:
        records = getattr(getattr(grundbuch, section_name), list_name)
        if not records:
            continue
        summaries.append(
            SectionSummary(
                section=f"{section_name}.{list_name}",
                total=len(records),
                geroetet=sum(1 for r in records if r.ist_geroetet()),
            )
        )
    return summaries


def active_parcel_area(grundbuch: Grundbuch) -> int:
    """Total square meters of all parcels that are not redacted."""
    return sum(
        e.groesse.total_square_meters()
        for e in grundbuch.bestandsverzeichnis.eintraege
        if isinstance(e, BvEintragFlurstueck) and not e.ist_geroetet()
    )


# ─── Individual Checks ───────────────────────────────────────────────


def check_redaction_conflicts(grundbuch: Grundbuch) -> list[ReviewFinding]:
    """Report manual redaction flags that disagree with the detector.

    The manual flag stays authoritative. Whether re-running detection
    should reset it is a product decision, so we only make it visible.
    """
    findings: list[ReviewFinding] = []
    for path, record in iter_records(grundbuch):
        manual = record.manuell_geroetet
        automatic = record.automatisch_geroetet
        if manual is None or automatic is None or manual == automatic:
            continue
        findings.append(
            ReviewFinding(
                severity=Severity.INFO,
                code="MANUAL_OVERRIDE_CONTRADICTS_DETECTOR",
                field=path,
                message=(
                    f"Record was manually marked as "
                    f"{'redacted' if manual else 'not redacted'}, "
                    f"the detector says {'redacted' if automatic else 'not redacted'}. "
                    f"The manual flag applies."
                ),
                details={"manuell_geroetet": manual, "automatisch_geroetet": automatic},
            )
        )
    return findings


def check_empty_bookings(grundbuch: Grundbuch) -> list[ReviewFinding]:
    """Zu- and Abschreibungen without any text are most likely OCR leftovers."""
    findings: list[ReviewFinding] = []
    bv = grundbuch.bestandsverzeichnis
    for list_name, bookings in (
        ("zuschreibungen", bv.zuschreibungen),
        ("abschreibungen", bv.abschreibungen),
    ):
        for index, booking in enumerate(bookings):
            if booking.ist_leer():
                findings.append(
                    ReviewFinding(
                        severity=Severity.WARNING,
                        code="EMPTY_BOOKING",
                        field=f"bestandsverzeichnis.{list_name}[{index}]",
                        message="Booking has neither a property index number nor text.",
                    )
                )
    return findings


def check_duplicate_lfd_nr(grundbuch: Grundbuch) -> list[ReviewFinding]:
    """Active entries in one section must have distinct running numbers.

    Redacted entries are skipped: a voided entry's number is often
    reused by its replacement.
    """
    findings: list[ReviewFinding] = []
    sections = (
        ("bestandsverzeichnis", grundbuch.bestandsverzeichnis.eintraege),
        ("abt1", grundbuch.abt1.eintraege),
        ("abt2", grundbuch.abt2.eintraege),
        ("abt3", grundbuch.abt3.eintraege),
    )
    for section_name, entries in sections:
        positions: dict[int, list[int]] = defaultdict(list)
        for index, entry in enumerate(entries):
            if not entry.ist_geroetet():
                positions[entry.lfd_nr].append(index)
        for lfd_nr, indices in positions.items():
            if len(indices) < 2:
                continue
            findings.append(
                ReviewFinding(
                    severity=Severity.WARNING,
                    code="DUPLICATE_LFD_NR",
                    field=f"{section_name}.eintraege",
                    message=(
                        f"Running number {lfd_nr} is used by {len(indices)} "
                        f"active entries in {section_name}."
                    ),
                    details={"lfd_nr": lfd_nr, "indices": indices},
                )
            )
    return findings


def check_page_references(pdf: PdfFile) -> list[ReviewFinding]:
    """Record positions must point at a page that has an OCR layout.

    Only meaningful for digitized files whose layout is present.
    """
    if not pdf.digitalisiert or pdf.hocr.is_empty():
        return []

    findings: list[ReviewFinding] = []
    for path, record in iter_records(pdf.analysiert):
        position = record.position_in_pdf
        if position is None or position.seite in pdf.hocr.seiten:
            continue
        findings.append(
            ReviewFinding(
                severity=Severity.ERROR,
                code="UNKNOWN_PAGE_REFERENCE",
                field=path,
                message=f"Record refers to page {position.seite}, which has no OCR layout.",
                details={"seite": position.seite},
            )
        )
    return findings
