from enum import Enum
from typing import Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    INVALID_TYPE = "invalid_type"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    CLASSIFICATION = "classification"
    INTERNAL = "internal"


# Single place where domain errors meet HTTP status codes
STATUS_CODES: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.INVALID_TYPE: 422,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CLASSIFICATION: 400,
    ErrorKind.INTERNAL: 500,
}


class StringAnalyzerError(Exception):
    """Base class for every error the service reports to clients"""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def to_dict(self) -> Dict:
        body = {"error": self.message}
        if self.field:
            body["details"] = {self.field: self.message}
        return body


class ValidationError(StringAnalyzerError):
    """Malformed or missing client input"""

    kind = ErrorKind.VALIDATION


class InvalidTypeError(ValidationError):
    """A field is present but has the wrong type"""

    kind = ErrorKind.INVALID_TYPE


class ConflictError(StringAnalyzerError):
    """The string is already stored"""

    kind = ErrorKind.CONFLICT


class NotFoundError(StringAnalyzerError):
    """No record for the given string"""

    kind = ErrorKind.NOT_FOUND


class ClassificationError(StringAnalyzerError):
    """A natural language query matched none of the known phrasings"""

    kind = ErrorKind.CLASSIFICATION


class InternalError(StringAnalyzerError):
    kind = ErrorKind.INTERNAL
