from fastapi import APIRouter, Depends, Query, Request, status
from typing import Optional
import logging

from string_analyzer import schemas
from string_analyzer.errors import InternalError, NotFoundError
from string_analyzer.services.classifier import classify
from string_analyzer.services.filters import apply_filters, parse_filters
from string_analyzer.store import StringStore

router = APIRouter()
logger = logging.getLogger(__name__)


def get_store(request: Request) -> StringStore:
    """Dependency returning the store owned by the running application."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise InternalError("String store is not initialised")
    return store


@router.post("/strings", response_model=schemas.StringRecord, status_code=status.HTTP_201_CREATED)
def create_string(string_data: schemas.StringCreate, store: StringStore = Depends(get_store)):
    """
    Analyze and store a string.
    Returns 409 if string already exists.
    """
    return store.insert(string_data.value)


@router.get("/strings", response_model=schemas.StringListResponse)
def get_all_strings(
    is_palindrome: Optional[str] = Query(None, description="Filter by palindrome (true/false)"),
    min_length: Optional[str] = Query(None, description="Minimum string length"),
    max_length: Optional[str] = Query(None, description="Maximum string length"),
    word_count: Optional[str] = Query(None, description="Exact word count"),
    contains_character: Optional[str] = Query(None, description="Single character the string must contain"),
    store: StringStore = Depends(get_store),
):
    """
    Get all strings with optional filtering.
    Query parameters arrive as raw text and are validated here so every
    failure reports which parameter was wrong.
    """
    spec = parse_filters({
        "is_palindrome": is_palindrome,
        "min_length": min_length,
        "max_length": max_length,
        "word_count": word_count,
        "contains_character": contains_character,
    })
    result = apply_filters(store.enumerate(), spec)

    return schemas.StringListResponse(
        data=result.records,
        count=result.count,
        filters_applied=result.filters_applied,
    )


@router.get("/strings/filter-by-natural-language", response_model=schemas.NaturalLanguageResponse)
def filter_by_natural_language(
    query: Optional[str] = Query(None, description="Natural language query"),
    store: StringStore = Depends(get_store),
):
    """
    Filter strings using natural language queries.
    Example: "all single word palindromic strings"
    """
    spec = classify(query)
    result = apply_filters(store.enumerate(), spec)

    return schemas.NaturalLanguageResponse(
        data=result.records,
        count=result.count,
        interpreted_query=schemas.InterpretedQuery(
            original=query,
            parsed_filters=result.filters_applied,
        ),
    )


@router.get("/strings/{string_value:path}", response_model=schemas.StringRecord)
def get_string(string_value: str, store: StringStore = Depends(get_store)):
    """
    Get analysis for a specific string.
    Returns 404 if string doesn't exist.
    """
    record = store.get(string_value)
    if record is None:
        raise NotFoundError("String does not exist in the system")
    return record


@router.delete("/strings/{string_value:path}", status_code=status.HTTP_204_NO_CONTENT)
def delete_string(string_value: str, store: StringStore = Depends(get_store)):
    """
    Delete a string from the system.
    Returns 404 if string doesn't exist.
    """
    store.delete(string_value)
    return None
