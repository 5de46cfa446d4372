"""Normalization of free-text elevation, aspect and instability values.

Field reports are written by the public and by forecasters, so the same
category arrives in many spellings ('>TL', 'ATL', 'Above treeline',
'&#62;TL'). Each classifier maps one raw string onto a fixed category.
All three are total: they return a value for every input, including
None and blank strings.
"""

import re

from models.aggregation import Aspect, ElevationBand, InstabilityLevel

# Upstream HTML-escapes the comparison signs in elevation codes
HTML_ENTITIES = {
    "&#62;": ">",
    "&#60;": "<",
    "&gt;": ">",
    "&lt;": "<",
}

ABOVE_TREELINE_MARKERS = ("ATL", "ABOVE", "ALPINE")
BELOW_TREELINE_MARKERS = ("BTL", "BELOW", "SUB")
NEAR_TREELINE_MARKERS = ("NTL", "NEAR", "TREELINE")

# Two-letter codes must be tried first so 'NW' is never read as 'N'
TWO_LETTER_ASPECTS = (Aspect.NE, Aspect.NW, Aspect.SE, Aspect.SW)
SINGLE_LETTER_ASPECTS = (Aspect.N, Aspect.E, Aspect.S, Aspect.W)

# Checked in order; the first level with a matching keyword wins
INSTABILITY_KEYWORDS: list[tuple[InstabilityLevel, tuple[str, ...]]] = [
    (InstabilityLevel.MINOR, ("minor", "slight", "light")),
    (InstabilityLevel.MODERATE, ("moderate", "medium")),
    (InstabilityLevel.MAJOR, ("major", "heavy", "significant")),
    (InstabilityLevel.SEVERE, ("severe", "extreme", "widespread")),
]


def _aspect_pattern(code: str) -> re.Pattern:
    # A code counts as a whole word when no letter touches it on either side
    return re.compile(rf"(?<![^\W\d_]){code}(?![^\W\d_])")


_ASPECT_PATTERNS: dict[Aspect, re.Pattern] = {
    aspect: _aspect_pattern(aspect.value)
    for aspect in TWO_LETTER_ASPECTS + SINGLE_LETTER_ASPECTS
}


def decode_elevation(elevation: str) -> str:
    """Decode HTML-escaped comparison signs, then trim and uppercase."""
    for entity, char in HTML_ENTITIES.items():
        elevation = elevation.replace(entity, char)
    return elevation.strip().upper()


def classify_elevation(elevation: str | None) -> ElevationBand:
    """Map a raw elevation string to a treeline band.

    Above-treeline markers are tested before below-treeline markers, and
    both before near-treeline, because 'TL' is a substring of 'ATL' and
    'BTL'. A string carrying both an above and a below marker is above.
    """
    if not elevation:
        return ElevationBand.UNCLASSIFIED

    decoded = decode_elevation(elevation)

    if (
        ">TL" in decoded
        or decoded.startswith(">")
        or any(marker in decoded for marker in ABOVE_TREELINE_MARKERS)
    ):
        return ElevationBand.ABOVE_TREELINE

    if (
        "<TL" in decoded
        or decoded.startswith("<")
        or any(marker in decoded for marker in BELOW_TREELINE_MARKERS)
    ):
        return ElevationBand.BELOW_TREELINE

    if decoded == "TL" or any(marker in decoded for marker in NEAR_TREELINE_MARKERS):
        return ElevationBand.NEAR_TREELINE

    return ElevationBand.UNCLASSIFIED


def _match_aspect(upper: str, candidates: tuple[Aspect, ...]) -> Aspect | None:
    for aspect in candidates:
        if upper == aspect.value or _ASPECT_PATTERNS[aspect].search(upper):
            return aspect
    return None


def classify_aspect(aspect: str | None) -> Aspect:
    """Map a raw aspect string to one of the eight compass points.

    Only letter codes are recognized ('NE', 'N facing'); spelled-out
    directions such as 'northeast' are unclassified.
    """
    if not aspect:
        return Aspect.UNCLASSIFIED

    upper = aspect.upper().strip()
    return (
        _match_aspect(upper, TWO_LETTER_ASPECTS)
        or _match_aspect(upper, SINGLE_LETTER_ASPECTS)
        or Aspect.UNCLASSIFIED
    )


def classify_instability(value: str | None) -> InstabilityLevel:
    """Map a free-text cracking/collapsing rating to a severity level.

    Unrecognized text falls back to NONE rather than being unclassified.
    """
    if not value:
        return InstabilityLevel.NONE

    lower = value.lower()
    if "none" in lower or lower == "no":
        return InstabilityLevel.NONE

    for level, keywords in INSTABILITY_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return level

    return InstabilityLevel.NONE
