"""Shareholder name matching.

Booking records are keyed by free-text display names that drift over time
("Dom & Melanie" vs "Melanie and Dom"). Names are compared after
normalization: alias lookup, '&' -> 'and', case-fold, whitespace collapse.

Known alternate spellings are built in; a config's name_aliases are merged
over them.
"""

import re

_WHITESPACE = re.compile(r"\s+")

DEFAULT_ALIASES = {
    "Gerry & Georgina": "Georgina and Jerry",
    "Gerry and Georgina": "Georgina and Jerry",
    "Mike & Janelle": "Janelle and Mike",
    "Mike and Janelle": "Janelle and Mike",
    "Brian & Monique": "Monique and Brian",
    "Brian and Monique": "Monique and Brian",
    "Brian & Sam": "Sam and Brian",
    "Brian and Sam": "Sam and Brian",
    "Ernest & Sandy": "Sandy and Ernest",
    "Ernest and Sandy": "Sandy and Ernest",
    "Jeff & Lori": "Lori and Jeff",
    "Jeff and Lori": "Lori and Jeff",
    "David & Gayla": "Gayla and David",
    "David and Gayla": "Gayla and David",
    "Saurabh & Jessica": "Jessica and Saurabh",
    "Saurabh and Jessica": "Jessica and Saurabh",
    "Dom & Melanie": "Melanie and Dom",
    "Dom and Melanie": "Melanie and Dom",
    "Julia, Mandy & Bryan": "Julia, Mandy and Bryan",
}


def _fold(name: str) -> str:
    return _WHITESPACE.sub(" ", name.replace("&", "and")).strip().lower()


def _alias_index(aliases: dict[str, str] | None) -> dict[str, str]:
    index = {_fold(alt): canonical for alt, canonical in DEFAULT_ALIASES.items()}
    if aliases:
        index.update({_fold(alt): canonical for alt, canonical in aliases.items()})
    return index


def canonical_name(name: str | None, aliases: dict[str, str] | None = None) -> str:
    """Canonical spelling of a name, with casing preserved."""
    if not name:
        return ""
    n = _WHITESPACE.sub(" ", str(name).replace("&", "and")).strip()
    return _alias_index(aliases).get(_fold(n), n)


def normalize_name(name: str | None, aliases: dict[str, str] | None = None) -> str:
    """Comparison key for a shareholder name."""
    return _fold(canonical_name(name, aliases))


def format_name_for_display(name: str | None,
                            aliases: dict[str, str] | None = None) -> str:
    """'&' becomes 'and' and known aliases map to their canonical name."""
    return canonical_name(name, aliases)


def names_match(a: str | None, b: str | None,
                aliases: dict[str, str] | None = None) -> bool:
    key = normalize_name(a, aliases)
    return bool(key) and key == normalize_name(b, aliases)
