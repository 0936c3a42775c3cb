"""Font catalog loading and family lookup."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from pydantic import ValidationError

from fontgate.config import DEFAULT_CATALOG_URL, DEFAULT_FETCH_TIMEOUT
from fontgate.errors import CatalogError
from fontgate.schema import CatalogEntry, CatalogResponse

logger = logging.getLogger("fontgate.catalog")


class Catalog:
    """Read-only, ordered snapshot of catalog entries keyed by family name.

    When two entries share a family name the first one wins lookups.
    """

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        self._entries: tuple[CatalogEntry, ...] = tuple(entries)
        self._by_family: dict[str, CatalogEntry] = {}
        for entry in self._entries:
            self._by_family.setdefault(entry.family, entry)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __contains__(self, family: object) -> bool:
        return family in self._by_family

    def get(self, family: str) -> CatalogEntry | None:
        """Exact, case-sensitive lookup by family name."""
        return self._by_family.get(family)

    def to_json(self) -> list[dict]:
        return [entry.to_json() for entry in self._entries]


def parse_catalog(payload: bytes | str | dict) -> Catalog:
    """Parse a webfonts list response body into a :class:`Catalog`."""
    try:
        data = json.loads(payload) if isinstance(payload, (bytes, str)) else payload
        response = CatalogResponse.model_validate(data)
    except json.JSONDecodeError as e:
        msg = f"Catalog response is not valid JSON: {e}"
        raise CatalogError(msg) from e
    except ValidationError as e:
        msg = f"Catalog response has an unexpected shape: {e.error_count()} error(s)"
        raise CatalogError(msg) from e
    return Catalog(response.items)


def fetch_catalog(
    api_key: str,
    *,
    url: str = DEFAULT_CATALOG_URL,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
) -> Catalog:
    """GET the webfonts list from the catalog API and parse it.

    Raises CatalogError on any network, HTTP or decoding failure.
    """
    logger.info("Fetching Google Fonts API font list")
    sep = "&" if "?" in url else "?"
    req = Request(f"{url}{sep}{urlencode({'key': api_key})}", method="GET")
    req.add_header("Accept", "application/json")
    try:
        with urlopen(req, timeout=timeout) as resp:
            body = resp.read()
    except HTTPError as e:
        msg = f"Catalog API returned HTTP {e.code}"
        raise CatalogError(msg) from e
    except (URLError, OSError) as e:
        msg = f"Catalog API request failed: {e}"
        raise CatalogError(msg) from e

    catalog = parse_catalog(body)
    logger.info("Loaded %d font families", len(catalog))
    return catalog
