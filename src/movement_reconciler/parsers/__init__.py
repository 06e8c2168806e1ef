"""Request parsing and schema validation."""

from movement_reconciler.parsers.base import ParseError, RequestValidationError
from movement_reconciler.parsers.request_parser import (
    RequestParser,
    load_request,
    parse_request,
)

__all__ = [
    "ParseError",
    "RequestValidationError",
    "RequestParser",
    "parse_request",
    "load_request",
]
