"""Validation error formatting shared by envelope codecs."""

from pydantic import ValidationError


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic validation error into one line of text."""
    parts: list[str] = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "payload"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts) if parts else str(error)
