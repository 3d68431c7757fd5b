"""Row boundary: raw mappings in, typed records out."""

from .rows import RowValidator, parse_payer_row, parse_provider_row, parse_relationship_row

__all__ = [
    "RowValidator",
    "parse_payer_row",
    "parse_provider_row",
    "parse_relationship_row",
]
