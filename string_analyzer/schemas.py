from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from typing import Dict, Optional, List, Any
from datetime import datetime


class StringCreate(BaseModel):
    value: StrictStr = Field(..., description="String to analyze")

    @field_validator('value')
    @classmethod
    def validate_encodable(cls, v):
        """Reject text that is not valid Unicode, e.g. a lone "\\ud800" JSON escape"""
        try:
            v.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError("Value must be valid Unicode text")
        return v


class AnalysisProperties(BaseModel):
    model_config = ConfigDict(frozen=True)

    length: int
    is_palindrome: bool
    unique_characters: int
    word_count: int
    sha256_hash: str
    character_frequency_map: Dict[str, int]


class StringRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    value: str
    properties: AnalysisProperties
    created_at: datetime


class FilterSpec(BaseModel):
    """Optional predicates over stored records, combined with AND"""

    model_config = ConfigDict(frozen=True)

    is_palindrome: Optional[bool] = None
    min_length: Optional[int] = Field(None, ge=0)
    max_length: Optional[int] = Field(None, ge=0)
    word_count: Optional[int] = Field(None, ge=0)
    contains_character: Optional[str] = Field(None, min_length=1, max_length=1)

    def applied(self) -> Dict[str, Any]:
        """Populated fields only, in declaration order"""
        return self.model_dump(exclude_none=True)


class StringListResponse(BaseModel):
    data: List[StringRecord]
    count: int
    filters_applied: Dict[str, Any] = {}


class InterpretedQuery(BaseModel):
    original: str
    parsed_filters: Dict[str, Any]


class NaturalLanguageResponse(BaseModel):
    data: List[StringRecord]
    count: int
    interpreted_query: InterpretedQuery
