import hashlib
import re
from collections import Counter
from typing import Dict

from string_analyzer.schemas import AnalysisProperties

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def compute_sha256(text: str) -> str:
    """Compute SHA-256 hash of a string"""
    # surrogatepass keeps hashing total for lone surrogates; valid text encodes as plain UTF-8
    return hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest()


def is_palindrome(text: str) -> bool:
    """
    Check if string is palindrome.

    Case-insensitive; anything outside [a-z0-9] is ignored, so a string
    with nothing left after cleaning counts as a palindrome.
    """
    cleaned = _NON_ALNUM.sub("", text.lower())
    return cleaned == cleaned[::-1]


def count_unique_characters(text: str) -> int:
    """Count distinct characters, ignoring case and all whitespace"""
    return len({ch for ch in text.lower() if not ch.isspace()})


def count_words(text: str) -> int:
    """Count words separated by runs of whitespace"""
    stripped = text.strip()
    if not stripped:
        return 0
    return len(stripped.split())


def get_character_frequency(text: str) -> Dict[str, int]:
    """Get frequency map of each lower-cased character, skipping spaces"""
    # Only the space itself is skipped; tabs and newlines are counted
    return dict(Counter(ch for ch in text.lower() if ch != " "))


def analyze_string(value: str) -> AnalysisProperties:
    """Analyze a string and return all computed properties"""
    return AnalysisProperties(
        length=len(value),
        is_palindrome=is_palindrome(value),
        unique_characters=count_unique_characters(value),
        word_count=count_words(value),
        sha256_hash=compute_sha256(value),
        character_frequency_map=get_character_frequency(value),
    )
