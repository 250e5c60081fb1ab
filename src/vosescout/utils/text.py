"""Text utilities: VOSE classification and whitespace cleanup."""

import re

# Case-insensitive substring markers for original-version (subtitled) showings.
# Checked in order; any hit classifies the text as VOSE. There is no
# exclusion list, so unrelated mentions of e.g. "subtítulo" also match.
VOSE_MARKERS: tuple[str, ...] = (
    "VOSE",
    "V.O.S.E",
    "V.O.S",
    "V.O.",
    "VERSIÓN ORIGINAL",
    "VERSION ORIGINAL",
    "ORIGINAL SUBTITULADA",
    "SUBTITULADO",
    "SUBTITULADA",
    "SUBTÍTULO",
    "SUBTITULO",
)

# The bare abbreviations only count as whole words ("VO", "Inglés VO", "2D VOS"),
# never inside another word ("VOZ").
_VO_WORD_RE = re.compile(r"(?<![A-ZÁÉÍÓÚÑ0-9])VOS?(?![A-ZÁÉÍÓÚÑ0-9])")


def is_vose(text: str | None) -> bool:
    """
    Decide whether a language/format label denotes an original-version showing.

    Args:
        text: Structured language field or free text from a listing card

    Returns:
        True if any VOSE marker appears in the text
    """
    if not text:
        return False

    upper = text.upper()
    if any(marker in upper for marker in VOSE_MARKERS):
        return True

    return bool(_VO_WORD_RE.search(upper))


def clean_text(text: str) -> str:
    """Collapse runs of whitespace and strip the ends."""
    return re.sub(r"\s+", " ", text).strip()
