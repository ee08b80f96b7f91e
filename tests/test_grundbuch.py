"""
Tests for the register sheet records: redaction precedence, entry shape
resolution, title block identity.

Run: pytest tests/ -v
"""

from __future__ import annotations

import itertools
from typing import Any

import pytest
from pydantic import ValidationError

from grundbuch_format.area import GroesseHektar
from grundbuch_format.exceptions import DecodeError, EntryShapeError
from grundbuch_format.geometry import PositionInPdf, Rect
from grundbuch_format.grundbuch import (
    RECORD_KINDS,
    Abt1EintragV1,
    Abt1EintragV2,
    Abteilung1,
    Abteilung2,
    Bestandsverzeichnis,
    BvAbschreibung,
    BvEintragFlurstueck,
    BvEintragRecht,
    BvZuschreibung,
    Titelblatt,
    parse_abt1_eintrag,
)
from grundbuch_format.text import FlexibleText


def _make_record(kind: type, **overrides: Any):
    """Factory: smallest valid record of ``kind`` (all required counts set to 1)."""
    kwargs: dict[str, Any] = {
        name: 1 for name, field in kind.model_fields.items() if field.is_required()
    }
    kwargs.update(overrides)
    return kind(**kwargs)


# ═══════════════════════════════════════════════════════════════════════
# REDACTION PRECEDENCE
# ═══════════════════════════════════════════════════════════════════════

FLAG_VALUES = (None, True, False)


def _expected(manual: bool | None, automatic: bool | None) -> bool:
    if manual is not None:
        return manual
    if automatic is not None:
        return automatic
    return False


class TestRedactionPrecedence:
    """The same rule holds for every one of the record kinds."""

    def test_all_fifteen_kinds_are_covered(self):
        assert len(RECORD_KINDS) == 15

    @pytest.mark.parametrize("kind", RECORD_KINDS, ids=lambda k: k.__name__)
    @pytest.mark.parametrize(
        "manual, automatic", list(itertools.product(FLAG_VALUES, FLAG_VALUES))
    )
    def test_precedence_table(self, kind, manual, automatic):
        record = _make_record(
            kind, manuell_geroetet=manual, automatisch_geroetet=automatic
        )
        assert record.ist_geroetet() is _expected(manual, automatic)

    @pytest.mark.parametrize("kind", RECORD_KINDS, ids=lambda k: k.__name__)
    def test_manual_false_beats_automatic_true(self, kind):
        record = _make_record(kind, manuell_geroetet=False, automatisch_geroetet=True)
        assert record.ist_geroetet() is False

    @pytest.mark.parametrize("kind", RECORD_KINDS, ids=lambda k: k.__name__)
    def test_no_flags_means_not_redacted(self, kind):
        assert _make_record(kind).ist_geroetet() is False

    def test_flags_must_be_booleans(self):
        with pytest.raises(ValueError):
            BvZuschreibung(automatisch_geroetet="yes")


# ═══════════════════════════════════════════════════════════════════════
# ABTEILUNG 1 ENTRY SHAPES
# ═══════════════════════════════════════════════════════════════════════


class TestOwnerEntryResolution:
    """Legacy shape first, versioned shape second, otherwise an error."""

    def test_payload_without_version_is_legacy(self):
        entry = parse_abt1_eintrag(
            {"lfd_nr": 1, "eigentuemer": "Max Mustermann", "bv_nr": "1, 2"}
        )
        assert isinstance(entry, Abt1EintragV1)
        assert entry.bv_nr == FlexibleText("1, 2")

    def test_minimal_legacy_payload(self):
        assert isinstance(parse_abt1_eintrag({"lfd_nr": 4}), Abt1EintragV1)

    def test_payload_with_version_is_current(self):
        entry = parse_abt1_eintrag(
            {"lfd_nr": 2, "eigentuemer": ["Erika Musterfrau"], "version": 2}
        )
        assert isinstance(entry, Abt1EintragV2)
        assert entry.version == 2

    def test_missing_running_number_fits_neither(self):
        with pytest.raises(EntryShapeError) as exc_info:
            parse_abt1_eintrag({"eigentuemer": "Max"})
        assert exc_info.value.code == "ENTRY_SHAPE_UNRESOLVED"
        assert exc_info.value.details["errors"]

    def test_wrongly_typed_version_fits_neither(self):
        with pytest.raises(EntryShapeError):
            parse_abt1_eintrag({"lfd_nr": 1, "version": "2"})

    def test_string_running_number_fits_neither(self):
        with pytest.raises(EntryShapeError):
            parse_abt1_eintrag({"lfd_nr": "1"})

    def test_versioned_payload_with_legacy_fields_fits_neither(self):
        with pytest.raises(EntryShapeError):
            parse_abt1_eintrag(
                {
                    "lfd_nr": 1,
                    "version": 2,
                    "bv_nr": "1, 2",
                    "grundlage_der_eintragung": "Auflassung",
                }
            )

    @pytest.mark.parametrize("legacy_key", ["bv_nr", "grundlage_der_eintragung"])
    def test_versioned_shape_refuses_each_legacy_field(self, legacy_key: str):
        with pytest.raises(EntryShapeError):
            parse_abt1_eintrag({"lfd_nr": 1, "version": 2, legacy_key: "x"})

    def test_entry_shape_error_is_a_decode_error(self):
        with pytest.raises(DecodeError):
            parse_abt1_eintrag([1, 2])

    def test_section_resolves_each_entry(self):
        abt1 = Abteilung1.model_validate(
            {
                "eintraege": [
                    {"lfd_nr": 1, "eigentuemer": "Alt"},
                    {"lfd_nr": 2, "eigentuemer": "Neu", "version": 1},
                ]
            }
        )
        assert [type(e) for e in abt1.eintraege] == [Abt1EintragV1, Abt1EintragV2]

    def test_constructed_instances_keep_their_shape(self):
        abt1 = Abteilung1(eintraege=[Abt1EintragV2(lfd_nr=1, version=2)])
        assert isinstance(abt1.eintraege[0], Abt1EintragV2)

    def test_encoded_shapes_resolve_back_to_themselves(self):
        v1 = Abt1EintragV1(lfd_nr=1, eigentuemer="A")
        v2 = Abt1EintragV2(lfd_nr=2, eigentuemer="B", version=2)
        assert isinstance(parse_abt1_eintrag(v1.model_dump(mode="json")), Abt1EintragV1)
        assert isinstance(parse_abt1_eintrag(v2.model_dump(mode="json")), Abt1EintragV2)

    @pytest.mark.parametrize(
        "entry",
        [
            Abt1EintragV1(lfd_nr=3, eigentuemer=["Max Mustermann", "geb. 1950"]),
            Abt1EintragV2(lfd_nr=3, eigentuemer=["Max Mustermann", "geb. 1950"], version=2),
        ],
        ids=["v1", "v2"],
    )
    def test_accessors_work_on_both_shapes(self, entry):
        assert entry.get_lfd_nr() == 3
        assert entry.get_eigentuemer() == "Max Mustermann\r\ngeb. 1950"


# ═══════════════════════════════════════════════════════════════════════
# BESTANDSVERZEICHNIS
# ═══════════════════════════════════════════════════════════════════════


class TestPropertyIndex:
    def test_parcel_payload_is_parcel(self):
        bv = Bestandsverzeichnis.model_validate(
            {
                "eintraege": [
                    {"lfd_nr": 1, "flur": 2, "flurstueck": "10/1"},
                    {"lfd_nr": 2, "zu_nr": "1", "text": "Wegerecht an Flurstück 11"},
                ]
            }
        )
        assert isinstance(bv.eintraege[0], BvEintragFlurstueck)
        assert isinstance(bv.eintraege[1], BvEintragRecht)

    def test_parcel_without_flur_is_not_a_right(self):
        with pytest.raises(ValidationError):
            Bestandsverzeichnis.model_validate(
                {
                    "eintraege": [
                        {
                            "lfd_nr": 1,
                            "flurstueck": "10/1",
                            "gemarkung": "Musterdorf",
                            "groesse": {"typ": "m", "wert": {"m2": 500}},
                        }
                    ]
                }
            )

    @pytest.mark.parametrize(
        "parcel_key, value",
        [
            ("flurstueck", "10/1"),
            ("gemarkung", "Musterdorf"),
            ("bezeichnung", "Hof- und Gebäudefläche"),
            ("groesse", {"typ": "m", "wert": {"m2": 500}}),
        ],
    )
    def test_right_shape_refuses_each_parcel_field(self, parcel_key: str, value: Any):
        with pytest.raises(ValidationError):
            Bestandsverzeichnis.model_validate(
                {"eintraege": [{"lfd_nr": 1, parcel_key: value}]}
            )

    def test_parcel_area_decodes(self):
        bv = Bestandsverzeichnis.model_validate(
            {"eintraege": [{"lfd_nr": 1, "flur": 1, "groesse": {"typ": "ha", "wert": {"a": 3}}}]}
        )
        assert bv.eintraege[0].groesse == GroesseHektar.from_parts(a=3)

    def test_empty_description_is_absent(self):
        parcel = BvEintragFlurstueck(lfd_nr=1, flur=1, bezeichnung="", gemarkung="")
        assert parcel.bezeichnung is None
        assert parcel.gemarkung is None

    def test_position_in_pdf(self):
        parcel = BvEintragFlurstueck(
            lfd_nr=1,
            flur=1,
            position_in_pdf=PositionInPdf(
                seite="3", rect=Rect(min_x=10, min_y=20, max_x=30, max_y=40)
            ),
        )
        assert parcel.position_in_pdf.seite == "3"

    def test_position_requires_page_number(self):
        with pytest.raises(ValueError):
            PositionInPdf(seite="0", rect=Rect(min_x=0, min_y=0, max_x=1, max_y=1))

    @pytest.mark.parametrize("kind", [BvZuschreibung, BvAbschreibung])
    def test_booking_without_text_is_empty(self, kind):
        assert kind().ist_leer()
        assert not kind(bv_nr="1").ist_leer()
        assert not kind(text=["Von Blatt 12 hierher übertragen"]).ist_leer()

    def test_section_is_empty_only_without_any_record(self):
        assert Bestandsverzeichnis().is_empty()
        assert not Bestandsverzeichnis(zuschreibungen=[BvZuschreibung()]).is_empty()


class TestSections:
    def test_abteilung1_counts_every_list(self):
        assert Abteilung1().is_empty()
        assert not Abteilung1(loeschungen=[{"text": "gelöscht"}]).is_empty()

    def test_abteilung2_counts_every_list(self):
        assert Abteilung2().is_empty()
        assert not Abteilung2(veraenderungen=[{}]).is_empty()

    def test_models_are_immutable(self):
        entry = _make_record(BvZuschreibung)
        with pytest.raises(ValueError):
            entry.text = FlexibleText("neu")

    def test_edit_by_copy(self):
        entry = BvZuschreibung(text="alt")
        edited = entry.model_copy(update={"manuell_geroetet": True})
        assert edited.ist_geroetet()
        assert not entry.ist_geroetet()


# ═══════════════════════════════════════════════════════════════════════
# TITELBLATT AND GEOMETRY
# ═══════════════════════════════════════════════════════════════════════


class TestTitelblatt:
    def _tb(self, blatt: str) -> Titelblatt:
        return Titelblatt(amtsgericht="Musterstadt", grundbuch_von="Musterdorf", blatt=blatt)

    def test_usable_as_key(self):
        sheets = {self._tb("100"): "a", self._tb("100"): "b"}
        assert len(sheets) == 1

    def test_ordered_by_court_then_name_then_sheet(self):
        other_court = Titelblatt(amtsgericht="Aachen", grundbuch_von="Zeven", blatt="9")
        assert sorted([self._tb("200"), self._tb("100"), other_court]) == [
            other_court,
            self._tb("100"),
            self._tb("200"),
        ]


class TestRect:
    def test_ordered_by_fields(self):
        a = Rect(min_x=0, min_y=0, max_x=1, max_y=1)
        b = Rect(min_x=0, min_y=0, max_x=1, max_y=2)
        assert a < b
        assert max(a, b) == b

    def test_degenerate_rect_is_accepted(self):
        rect = Rect(min_x=5, min_y=5, max_x=1, max_y=1)
        assert rect.min_x > rect.max_x
