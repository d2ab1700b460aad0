"""
Grantee name handling.

The clerk's grantee field packs every defendant into one newline-delimited
block, in "LAST FIRST MIDDLE" registry order. The first line is normally the
homeowner.
"""

from __future__ import annotations

from typing import AbstractSet

from config.resolution import NAME_PREFIXES
from lis_pendens.models.resolution import NormalizedParty


def normalize(grantee_block: str | None) -> NormalizedParty:
    """Split a grantee block into ordered names; the first one is primary."""
    if not grantee_block:
        return NormalizedParty()
    names = tuple(n.strip() for n in grantee_block.split("\n") if n.strip())
    return NormalizedParty(all_names=names, primary_name=names[0] if names else "")


def extract_surname(primary_name: str, prefixes: AbstractSet[str] = NAME_PREFIXES) -> str:
    """
    Pick the token to use for a "contains surname" search.

    "DE OLIVEIRA ANDREA C" -> "OLIVEIRA" (leading particle skipped)
    "MAHURIN ESSIE B"      -> "MAHURIN"

    Lossy for multi-word surnames ("DE LA CRUZ" -> "LA").
    """
    parts = primary_name.split()
    if not parts:
        return ""
    if len(parts) >= 2 and parts[0].upper() in prefixes:
        return parts[1]
    return parts[0]


def meaningful_name_tokens(
    primary_name: str,
    surname: str,
    prefixes: AbstractSet[str] = NAME_PREFIXES,
) -> list[str]:
    """Other name tokens worth adding to a fuzzy owner search (no initials or particles)."""
    surname_upper = surname.upper()
    tokens: list[str] = []
    for part in primary_name.split():
        upper = part.upper()
        if len(upper) < 3 or upper in prefixes or upper == surname_upper:
            continue
        if upper not in tokens:
            tokens.append(upper)
    return tokens


def name_tokens(name: str) -> set[str]:
    """Uppercased whitespace tokens of a name."""
    return {part.upper() for part in name.split()}


def split_first_last(name: str, prefixes: AbstractSet[str] = NAME_PREFIXES) -> tuple[str, str]:
    """
    Split a registry-order name into (first_name, last_name).

    "MAHURIN ESSIE B"      -> ("ESSIE", "MAHURIN")
    "DE OLIVEIRA ANDREA C" -> ("ANDREA", "DE OLIVEIRA")
    """
    parts = name.upper().split()
    if not parts:
        return "", ""
    if len(parts) >= 3 and parts[0] in prefixes:
        return parts[2], f"{parts[0]} {parts[1]}"
    if len(parts) == 1:
        return "", parts[0]
    return parts[1], parts[0]
