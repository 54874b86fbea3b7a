"""
Name Normalization

Canonical matching keys for entity names. Two raw names refer to the same
entity for lookup purposes when their keys are equal.

Functions:
    normalize_name: Possessives, role-word plurals, whitespace
    strip_titles: Leading honorifics and office titles
    name_key: Lowercased normalized name, used as a lookup key
    split_names: Comma-separated field -> list of names
"""

from __future__ import annotations

import re

# Plural-looking proper nouns that must not be singularized
PRESERVED_NAMES = frozenset(
    {
        "united states",
        "united arab emirates",
        "netherlands",
        "philippines",
        "bahamas",
        "maldives",
        "seychelles",
        "comoros",
        "marshall islands",
        "solomon islands",
        "cayman islands",
        "falkland islands",
        "council of ministers",
        "committee of ministers",
        "conference of the parties",
        "council of governments",
    }
)

# Plural role suffix -> singular
ROLE_SUFFIXES: dict[str, str] = {
    "governments": "government",
    "ministers": "minister",
    "parties": "party",
    "companies": "company",
    "agencies": "agency",
}

# Leading titles, matched case-insensitively at the start of a name
TITLE_PATTERNS = (
    r"sen\.?\s+", r"senator\s+",
    r"rep\.?\s+", r"representative\s+",
    r"gov\.?\s+", r"governor\s+",
    r"pres\.?\s+", r"president\s+",
    r"vice\s+president\s+", r"vp\s+",
    r"sec\.?\s+", r"secretary\s+",
    r"attorney\s+general\s+",
    r"speaker\s+",
    r"leader\s+",
    r"chair\s+", r"chairman\s+", r"chairwoman\s+",
    r"amb\.?\s+", r"ambassador\s+",
    r"judge\s+", r"justice\s+",
    r"mayor\s+",
    r"dr\.?\s+", r"doctor\s+",
    r"mr\.?\s+", r"mrs\.?\s+", r"ms\.?\s+", r"miss\s+",
    r"the\s+honorable\s+", r"hon\.?\s+",
)

_POSSESSIVE_RE = re.compile(r"['’]s$", re.IGNORECASE)
_SUFFIX_RE = re.compile(
    "(" + "|".join(re.escape(s) for s in ROLE_SUFFIXES) + ")$", re.IGNORECASE
)
_TITLE_RE = re.compile("^(?:" + "|".join(TITLE_PATTERNS) + ")", re.IGNORECASE)


def _match_case(template: str, word: str) -> str:
    """Give `word` the case shape of `template`."""
    if template.isupper():
        return word.upper()
    if template[:1].isupper():
        return word[:1].upper() + word[1:]
    return word


def _strip_possessive(name: str) -> str:
    while True:
        stripped = _POSSESSIVE_RE.sub("", name).rstrip()
        if stripped == name:
            return name
        name = stripped


def _singularize(name: str) -> str:
    if " ".join(name.lower().split()) in PRESERVED_NAMES:
        return name
    match = _SUFFIX_RE.search(name)
    if not match:
        return name
    plural = match.group(1)
    singular = _match_case(plural, ROLE_SUFFIXES[plural.lower()])
    return name[: match.start(1)] + singular


def normalize_name(raw: str) -> str:
    """
    Convert a raw name into its canonical form.

    Steps: trim, strip trailing possessives ("NATO's" -> "NATO"), singularize
    a trailing role word unless the name is a preserved proper noun
    ("Foreign Ministers" -> "Foreign Minister"), collapse whitespace.

    Empty or whitespace-only input is returned unchanged; callers treat it
    as "no entity".
    """
    if not raw or not raw.strip():
        return raw

    name = _strip_possessive(raw.strip())
    name = _singularize(name)
    return " ".join(name.split())


def strip_titles(name: str) -> str:
    """Remove leading honorifics/titles ("Sen. Bernie Sanders" -> "Bernie Sanders")."""
    cleaned = name.strip()
    while True:
        stripped = _TITLE_RE.sub("", cleaned, count=1).strip()
        if stripped == cleaned or not stripped:
            return cleaned
        cleaned = stripped


def name_key(name: str) -> str:
    """Lowercased canonical form used as a lookup key."""
    return normalize_name(name).lower().strip()


def split_names(field: str | None) -> list[str]:
    """Split a comma-separated Actor/Target field; trims and drops empties."""
    if not field:
        return []
    return [part.strip() for part in field.split(",") if part.strip()]
