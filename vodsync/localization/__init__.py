"""Localized title resolution from external listing pages."""

from .title_resolver import (
    LookupSource,
    TitleResolver,
    fetch_name_pairs,
    find_localized_name,
    parse_name_pairs,
)

__all__ = [
    "LookupSource",
    "TitleResolver",
    "fetch_name_pairs",
    "find_localized_name",
    "parse_name_pairs",
]
