"""
grundbuch_format — exchange format for digitized German land-register sheets (.gbx).

Layers: OCR layout (hOCR) + per-page overrides + analyzed register sheet → one envelope
Derived values: redaction status, parcel area rendering, dehyphenated legal text.
"""

__version__ = "1.0.0"
