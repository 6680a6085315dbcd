"""Header handling for outbound requests and origin responses."""

from collections.abc import Iterable

_TOKEN_CHARS = frozenset("!#$%&'*+-.^_`|~0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")


def canonical_header_key(key: str) -> str:
    """Return the canonical MIME form of a header name (``x-test`` -> ``X-Test``).

    Names containing characters outside the HTTP token set are returned unchanged.
    """
    if not key or any(ch not in _TOKEN_CHARS for ch in key):
        return key
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))


class HeaderBuilder:
    """Build outbound header lists and collapse origin headers."""

    def build_outbound_headers(self, headers: dict[str, str]) -> list[tuple[str, str]]:
        """Add each caller header as its own entry.

        Names that differ only in case are both sent rather than overwritten.
        """
        return [(key, value) for key, value in headers.items()]

    def collapse_response_headers(self, items: Iterable[tuple[str, str]]) -> dict[str, str]:
        """Keep the first value observed for each header name, in origin order."""
        collapsed: dict[str, str] = {}
        for key, value in items:
            collapsed.setdefault(canonical_header_key(key), value)
        return collapsed
