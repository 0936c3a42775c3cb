"""The Font Gateway service: catalog listing and sample rendering.

One :class:`FontGateway` owns the read-only catalog snapshot and the font
file cache. The HTTP layer holds a reference to it and maps its exceptions
to response statuses.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from fontgate.cache import FontFileCache
from fontgate.catalog import Catalog
from fontgate.errors import FamilyNotFound, FontFetchError
from fontgate.fetcher import FontFileFetcher
from fontgate.renderer import load_font, render_sample

logger = logging.getLogger("fontgate.gateway")


class FontGateway:
    """Lists the catalog and renders family-name samples.

    Parameters
    ----------
    catalog:  Catalog snapshot loaded at startup.
    fetch:    Callable taking a URL and returning font bytes. Defaults to
              a :class:`FontFileFetcher`.
    cache:    Font file cache. A fresh one is created when omitted.
    """

    def __init__(
        self,
        catalog: Catalog,
        *,
        fetch: Callable[[str], bytes] | None = None,
        cache: FontFileCache | None = None,
    ):
        self.catalog = catalog
        self.cache = cache if cache is not None else FontFileCache()
        self._fetch = fetch if fetch is not None else FontFileFetcher()

    def list_catalog(self) -> list[dict]:
        return self.catalog.to_json()

    def font_file(self, family: str) -> bytes:
        """Return the family's regular font file bytes, downloading on first use."""
        entry = self.catalog.get(family)
        if entry is None:
            msg = f"Font not found: {family}"
            raise FamilyNotFound(msg)

        def fetch_regular() -> bytes:
            url = entry.files.regular
            if not url:
                msg = f"No regular font file listed for {family}"
                raise FontFetchError(msg)
            logger.info("Downloading font file for %s", family)
            return self._fetch(url)

        return self.cache.get_or_fetch(family, fetch_regular)

    def render(self, family: str) -> bytes:
        """Render ``family``'s own name in its regular style as PNG bytes.

        Raises FamilyNotFound, FontFetchError, FontParseError or RenderError.
        """
        data = self.font_file(family)
        return render_sample(load_font(data), family)
