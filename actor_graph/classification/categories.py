"""
Category Mapping

Translates external "instance of" identifiers (Wikidata QIDs) into the
closed Category set, and picks one category from a set of identifiers.

Selection: tally categories over all recognised identifiers; the highest
tally wins; ties go to the category earliest in CATEGORY_PRIORITY.
Unrecognised identifiers are ignored; nothing recognised -> UNKNOWN.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from actor_graph.types import Category

# Wikidata class QID -> category
INSTANCE_OF_CATEGORIES: dict[str, Category] = {
    # Countries
    "Q6256": Category.COUNTRY,  # country
    "Q3624078": Category.COUNTRY,  # sovereign state
    "Q3024240": Category.COUNTRY,  # historical country
    # Regions, states and cities
    "Q7275": Category.REGION,  # state
    "Q1048835": Category.REGION,  # political territorial entity
    "Q82794": Category.REGION,  # geographic region
    "Q56061": Category.REGION,  # administrative territorial entity
    "Q15284": Category.REGION,  # municipality
    "Q515": Category.REGION,  # city
    "Q1549591": Category.REGION,  # big city
    "Q5119": Category.REGION,  # capital
    "Q1637706": Category.REGION,  # city with millions of inhabitants
    # Legislatures
    "Q11204": Category.LEGISLATIVE_BRANCH,  # legislature
    "Q35749": Category.LEGISLATIVE_BRANCH,  # parliament
    # Political organizations
    "Q7278": Category.POLITICAL_ORGANIZATION,  # political party
    "Q7210356": Category.POLITICAL_ORGANIZATION,  # political organization
    # Public offices
    "Q294414": Category.PUBLIC_OFFICE,  # public office
    "Q4164871": Category.PUBLIC_OFFICE,  # position
    # Organizations
    "Q43229": Category.ORGANIZATION,  # organization
    "Q4830453": Category.ORGANIZATION,  # business
    "Q783794": Category.ORGANIZATION,  # company
    "Q891723": Category.ORGANIZATION,  # public company
    "Q1616075": Category.ORGANIZATION,  # private company
    "Q2659904": Category.ORGANIZATION,  # government organization
    "Q327333": Category.ORGANIZATION,  # government agency
    "Q1391145": Category.ORGANIZATION,  # international organization
    "Q163740": Category.ORGANIZATION,  # non-profit organization
    "Q31855": Category.ORGANIZATION,  # research institute
    "Q3918": Category.ORGANIZATION,  # university
    "Q875538": Category.ORGANIZATION,  # public university
    "Q2467461": Category.ORGANIZATION,  # university department
    "Q1371037": Category.ORGANIZATION,  # military organization
    "Q61951": Category.ORGANIZATION,  # armed forces
    # People
    "Q5": Category.PERSON,  # human
    "Q215627": Category.PERSON,  # person
}

# Tie-break order, most preferred first
CATEGORY_PRIORITY: tuple[Category, ...] = (
    Category.COUNTRY,
    Category.REGION,
    Category.LEGISLATIVE_BRANCH,
    Category.POLITICAL_ORGANIZATION,
    Category.PUBLIC_OFFICE,
    Category.ORGANIZATION,
    Category.PERSON,
)

# Names that read as something else to the external source
MANUAL_OVERRIDES: dict[str, Category] = {
    "israel": Category.COUNTRY,
    "georgia": Category.COUNTRY,
    "jordan": Category.COUNTRY,
    "turkey": Category.COUNTRY,
    "chad": Category.COUNTRY,
    "niger": Category.COUNTRY,
    "china": Category.COUNTRY,
    "congress": Category.LEGISLATIVE_BRANCH,
    "senate": Category.LEGISLATIVE_BRANCH,
    "house of representatives": Category.LEGISLATIVE_BRANCH,
    "parliament": Category.LEGISLATIVE_BRANCH,
    "white house": Category.PUBLIC_OFFICE,
    "pentagon": Category.ORGANIZATION,
    "kremlin": Category.PUBLIC_OFFICE,
}


def category_for_identifier(identifier: str) -> Category | None:
    """Category for a QID or a full entity URI; None if not on the allow-list."""
    return INSTANCE_OF_CATEGORIES.get(identifier.rstrip("/").rsplit("/", 1)[-1])


def select_category(identifiers: Iterable[str]) -> Category:
    """Pick one category from raw "instance of" identifiers."""
    tally: Counter[Category] = Counter()
    for identifier in identifiers:
        category = category_for_identifier(identifier)
        if category is not None:
            tally[category] += 1

    if not tally:
        return Category.UNKNOWN

    best = max(tally.values())
    return next(c for c in CATEGORY_PRIORITY if tally[c] == best)


# -----------------------------------------------------------------------------
# Display metadata
# -----------------------------------------------------------------------------

_COLORS: dict[Category, str] = {
    Category.COUNTRY: "blue",
    Category.REGION: "blue",
    Category.PERSON: "green",
    Category.PUBLIC_OFFICE: "green",
    Category.LEGISLATIVE_BRANCH: "red",
    Category.POLITICAL_ORGANIZATION: "purple",
    Category.ORGANIZATION: "purple",
    Category.UNKNOWN: "grey",
}

_LABELS: dict[Category, str] = {
    Category.COUNTRY: "Country",
    Category.REGION: "Region",
    Category.PERSON: "Person",
    Category.PUBLIC_OFFICE: "Public Office",
    Category.LEGISLATIVE_BRANCH: "Legislative Branch",
    Category.POLITICAL_ORGANIZATION: "Political Organization",
    Category.ORGANIZATION: "Organization",
    Category.UNKNOWN: "Unknown",
}

_ICONS: dict[Category, str] = {
    Category.COUNTRY: "🏛️",
    Category.REGION: "🏙️",
    Category.PERSON: "👤",
    Category.PUBLIC_OFFICE: "👔",
    Category.LEGISLATIVE_BRANCH: "⚖️",
    Category.POLITICAL_ORGANIZATION: "🗳️",
    Category.ORGANIZATION: "🏢",
    Category.UNKNOWN: "❓",
}


def category_color(category: Category) -> str:
    return _COLORS[Category(category)]


def category_label(category: Category) -> str:
    return _LABELS[Category(category)]


def category_icon(category: Category) -> str:
    return _ICONS[Category(category)]
