"""Lexical classification of OCR lines: wild-encounter trigger and species extraction."""

import re
from typing import Iterable, Iterator, List, Optional

WILD_TRIGGER = "a wild"

# Level marker that follows a species name, per supported client language
LEVEL_MARKERS = frozenset({"lv.", "nv.", "niv."})

# OCR often glues the level number onto the marker ("lv.5")
_LEVEL_TOKEN = re.compile(r"^(?:lv|nv|niv)\.\d*$")


def _lowered(lines: Iterable[Optional[str]]) -> Iterator[str]:
    # Unrecognised lines come through as None or "" and are skipped
    for line in lines:
        if line:
            yield line.lower()


def is_level_marker(token: str) -> bool:
    """True for a level marker token, with or without the level number attached."""
    return token in LEVEL_MARKERS or _LEVEL_TOKEN.match(token) is not None


def has_wild_trigger(lines: Iterable[Optional[str]]) -> bool:
    """True iff any line contains the wild-encounter phrase (case-insensitive)."""
    return any(WILD_TRIGGER in line for line in _lowered(lines))


def extract_species(lines: Iterable[Optional[str]]) -> List[str]:
    """Species tokens, i.e. the token right before a level marker.

    Tokens of a single character are OCR noise and ignored. Duplicates are
    kept because a double battle shows the same species twice.
    """
    species = []
    for line in _lowered(lines):
        tokens = line.split()
        for word, marker in zip(tokens, tokens[1:]):
            if is_level_marker(marker) and len(word) > 1:
                species.append(word)
    return species
