from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from string_analyzer.errors import ValidationError
from string_analyzer.schemas import FilterSpec, StringRecord

FILTER_FIELDS = ("is_palindrome", "min_length", "max_length", "word_count", "contains_character")


@dataclass
class FilterResult:
    records: List[StringRecord]
    filters_applied: Dict[str, Any] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.records)


def _parse_bool(name: str, raw: str) -> bool:
    if raw not in ("true", "false"):
        raise ValidationError(f"{name} must be true or false", field=name)
    return raw == "true"


def _parse_count(name: str, raw: str) -> int:
    token = raw.strip()
    if not token.isdigit() or not token.isascii():
        raise ValidationError(f"{name} must be a non-negative integer", field=name)
    try:
        return int(token)
    except ValueError:
        # Past the interpreter's int conversion digit limit
        raise ValidationError(f"{name} is too large", field=name)


def _parse_character(name: str, raw: str) -> str:
    char = raw.lower().strip()
    if len(char) != 1:
        raise ValidationError(f"{name} must be a single character", field=name)
    return char


_PARSERS = {
    "is_palindrome": _parse_bool,
    "min_length": _parse_count,
    "max_length": _parse_count,
    "word_count": _parse_count,
    "contains_character": _parse_character,
}


def parse_filters(params: Mapping[str, Optional[str]]) -> FilterSpec:
    """
    Validate raw query-string tokens into a FilterSpec.

    Fields are checked in a fixed order and the first bad one raises
    ValidationError naming that field. Absent (None) fields are skipped;
    a field that is present but empty is invalid.
    """
    parsed = {}
    for name in FILTER_FIELDS:
        raw = params.get(name)
        if raw is None:
            continue
        parsed[name] = _PARSERS[name](name, raw)
    return FilterSpec(**parsed)


def _matches(record: StringRecord, spec: FilterSpec) -> bool:
    props = record.properties
    if spec.is_palindrome is not None and props.is_palindrome != spec.is_palindrome:
        return False
    if spec.min_length is not None and props.length < spec.min_length:
        return False
    if spec.max_length is not None and props.length > spec.max_length:
        return False
    if spec.word_count is not None and props.word_count != spec.word_count:
        return False
    if spec.contains_character is not None and spec.contains_character not in record.value.lower():
        return False
    return True


def apply_filters(records: Iterable[StringRecord], spec: FilterSpec) -> FilterResult:
    """Keep the records satisfying every populated field, in their original order"""
    matched = [record for record in records if _matches(record, spec)]
    return FilterResult(records=matched, filters_applied=spec.applied())
