"""Query string values carried by API gateway events.

The gateway emits a different JSON shape per parameter depending on how many
values it has: ``true`` for a bare key, a string for one value, and a list of
strings for several. Each shape is its own type here.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FlagParam:
    """Parameter present without a value (``?debug``)."""

    def values(self) -> list[str]:
        return []


@dataclass(frozen=True)
class SingleParam:
    """Parameter with exactly one value (``?a=x``)."""

    value: str

    def values(self) -> list[str]:
        return [self.value]


@dataclass(frozen=True)
class MultiParam:
    """Parameter repeated with several values (``?a=x&a=y``)."""

    items: tuple[str, ...]

    def values(self) -> list[str]:
        return list(self.items)


QueryParam = FlagParam | SingleParam | MultiParam


def parse_query_param(raw: Any) -> QueryParam:
    """Map one raw JSON value onto its query parameter shape.

    Raises:
        ValueError: If the value is not a bool, a string or a list of strings.
    """
    if isinstance(raw, bool):
        return FlagParam()
    if isinstance(raw, str):
        return SingleParam(raw)
    if isinstance(raw, list):
        if not all(isinstance(item, str) for item in raw):
            raise ValueError(f"unexpected query string value: {raw!r}, type: list")
        return MultiParam(tuple(raw))
    raise ValueError(f"unexpected query string value: {raw!r}, type: {type(raw).__name__}")


def parse_query_string(raw: dict[str, Any]) -> dict[str, list[str]]:
    """Decode a whole ``queryString`` mapping into name -> ordered values."""
    return {name: parse_query_param(value).values() for name, value in raw.items()}
