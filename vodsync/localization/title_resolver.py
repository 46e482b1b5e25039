"""
Localized title lookup.

Each lookup source is a listing page where every title appears as an
element with class "name" followed by a sibling element holding the other
language's name:

    <td class="name">Show</td>
    <td><a href="...">ショー</a></td>

The first source lists canonical titles in its "name" cells (the sibling is
the Japanese name). The second and third sources list the localized name in
the "name" cell and the Japanese name in the sibling, so they are searched
with the Japanese name resolved by the first source.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence

import requests
from bs4 import BeautifulSoup, Tag

from vodsync.db import CatalogEntry
from vodsync.logger import setup_logging, log_function

logger = setup_logging(logger_name="title_resolver")

NAME_CLASS = "name"
REQUEST_TIMEOUT = 30


@dataclass(frozen=True)
class LookupSource:
    """
    A listing page to scrape.

    name_first: True when the "name" element holds the display name matched
    against the lookup key; False when it holds the localized name instead.
    """

    url: str
    name_first: bool = True


def _text_of(node) -> str:
    if isinstance(node, Tag):
        return node.get_text().strip()
    return str(node).strip()


def parse_name_pairs(markup: str, name_first: bool = True) -> Iterator[tuple[str, str]]:
    """
    Extract (display name, localized name) pairs from a listing page.

    Elements whose class attribute is exactly "name" are paired with the
    first child of their next element sibling. Malformed rows are skipped.
    """
    soup = BeautifulSoup(markup, "html.parser")
    for node in soup.find_all(lambda tag: tag.get("class") == [NAME_CLASS]):
        sibling = node.find_next_sibling()
        if sibling is None or not sibling.contents:
            continue
        own_text = _text_of(node)
        sibling_text = _text_of(sibling.contents[0])
        if name_first:
            yield own_text, sibling_text
        else:
            yield sibling_text, own_text


def fetch_name_pairs(source: LookupSource) -> Iterator[tuple[str, str]]:
    """Download a lookup page and lazily yield its name pairs."""
    response = requests.get(source.url, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()
    yield from parse_name_pairs(response.text, source.name_first)


def find_localized_name(
    title: str, pairs: Iterator[tuple[str, str]]
) -> Optional[str]:
    """Localized name of the first pair whose display name equals `title`."""
    for name, localized in pairs:
        if name == title:
            return localized or None
    return None


class TitleResolver:
    """
    Fills the empty localized names of a CatalogEntry.

    Names already present are never overwritten. Resolution is all-or-nothing:
    if any lookup raises, the error is logged and the entry is left untouched.
    """

    def __init__(
        self,
        sources: Sequence[Optional[LookupSource]],
        fetch_pairs: Callable[[LookupSource], Iterator[tuple[str, str]]] = fetch_name_pairs,
    ):
        if len(sources) != 3:
            raise ValueError("TitleResolver expects exactly three lookup sources")
        self.sources = tuple(sources)
        self.fetch_pairs = fetch_pairs

    @classmethod
    def from_config(cls, config) -> "TitleResolver":
        ja_site, zh_site, ru_site = config.lookup_sites
        return cls(
            [
                LookupSource(ja_site, name_first=True) if ja_site else None,
                LookupSource(zh_site, name_first=False) if zh_site else None,
                LookupSource(ru_site, name_first=False) if ru_site else None,
            ]
        )

    def _lookup(self, index: int, key: Optional[str]) -> Optional[str]:
        source = self.sources[index]
        if source is None or not key:
            return None
        return find_localized_name(key, self.fetch_pairs(source))

    @log_function(logger_name="title_resolver", log_execution_time=True)
    def resolve(self, entry: CatalogEntry) -> CatalogEntry:
        """
        Resolve missing localized names for `entry` in place.

        Returns:
            The same entry, with empty name fields filled where a lookup
            source had an exact match.
        """
        if entry.ja_jp and entry.zh_tw and entry.ru_ru:
            return entry

        logger.info(f"Getting localized titles for {entry.en_us}")
        try:
            ja_jp = entry.ja_jp or self._lookup(0, entry.en_us)
            zh_tw = entry.zh_tw or self._lookup(1, ja_jp)
            ru_ru = entry.ru_ru or self._lookup(2, ja_jp)
        except Exception as e:
            logger.warning(f"Cannot get localized titles for {entry.en_us}: {e}")
            return entry

        entry.ja_jp, entry.zh_tw, entry.ru_ru = ja_jp, zh_tw, ru_ru
        logger.info(f"Localized titles for {entry.en_us}: {ja_jp} / {zh_tw} / {ru_ru}")
        return entry
