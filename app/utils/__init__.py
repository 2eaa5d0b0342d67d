"""
Utilities Package

Helpers used across services:
- parse_identifier: validate a path identifier before touching the database
- contains_ci: literal, case-insensitive substring filter
"""

import uuid

from sqlalchemy import ColumnElement, func
from sqlalchemy.orm import InstrumentedAttribute

from app.exceptions import ValidationError


def parse_identifier(value: str, resource: str) -> str:
    """
    Normalise a resource id taken from the URL.

    Ids are UUIDs. Anything else is rejected up front with a 400 instead of
    becoming a pointless lookup that returns 404.

    Args:
        value: The raw path parameter
        resource: Name used in the error message ("book", "review")

    Returns:
        The canonical lowercase, hyphenated form of the id

    Raises:
        ValidationError: If value is not a well-formed id
    """
    try:
        return str(uuid.UUID(value))
    except (ValueError, AttributeError, TypeError):
        raise ValidationError.for_field("id", f"Invalid {resource} ID format")


def contains_ci(column: InstrumentedAttribute, term: str) -> ColumnElement[bool]:
    """
    Case-insensitive substring match that treats the term literally.

    % and _ in the term are escaped, so "50%" matches only "50%".
    """
    return func.lower(column).contains(term.lower(), autoescape=True)
