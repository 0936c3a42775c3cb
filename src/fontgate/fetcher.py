"""Font file download.

Font CDN redirect targets contain escaped characters (``%5B``, ``%2C`` ...)
in their paths. The default redirect handler runs the ``Location`` header
through ``urlparse``/``urlunparse`` before following it, which can rewrite
those paths. :class:`VerbatimRedirectHandler` follows the target as sent.
"""

from __future__ import annotations

import logging
import string
from http.client import HTTPException
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urljoin, urlsplit
from urllib.request import HTTPRedirectHandler, Request, build_opener

from fontgate.config import DEFAULT_FETCH_TIMEOUT
from fontgate.errors import FontFetchError

logger = logging.getLogger("fontgate.fetcher")

_ALLOWED_SCHEMES = ("http", "https", "")


class VerbatimRedirectHandler(HTTPRedirectHandler):
    """Follow redirects using the ``Location`` path exactly as sent.

    Only bytes http.client refuses to send (spaces, non-ASCII) are
    percent-encoded; existing escapes and path structure are left alone.
    """

    def http_error_302(self, req, fp, code, msg, headers):
        location = headers.get("location") or headers.get("uri")
        if not location:
            return None

        if urlsplit(location).scheme not in _ALLOWED_SCHEMES:
            reason = f"{msg} - Redirection to url '{location}' is not allowed"
            raise HTTPError(location, code, reason, headers, fp)

        # headers are decoded as ISO-8859-1; re-encode only what http.client rejects
        escaped = quote(location, encoding="iso-8859-1", safe=string.punctuation)
        newurl = urljoin(req.full_url, escaped)
        new = self.redirect_request(req, fp, code, msg, headers, newurl)
        if new is None:
            return None

        visited = new.redirect_dict = getattr(req, "redirect_dict", {})
        if visited.get(newurl, 0) >= self.max_repeats or len(visited) >= self.max_redirections:
            raise HTTPError(req.full_url, code, self.inf_msg + msg, headers, fp)
        visited[newurl] = visited.get(newurl, 0) + 1

        fp.read()
        fp.close()
        logger.debug("Following redirect %d -> %s", code, newurl)
        return self.parent.open(new, timeout=req.timeout)

    http_error_301 = http_error_303 = http_error_307 = http_error_308 = http_error_302


class FontFileFetcher:
    """Downloads raw font bytes over HTTP(S), following redirects verbatim."""

    def __init__(self, timeout: float = DEFAULT_FETCH_TIMEOUT):
        self.timeout = timeout
        self._opener = build_opener(VerbatimRedirectHandler)

    def __call__(self, url: str) -> bytes:
        return self.fetch(url)

    def fetch(self, url: str) -> bytes:
        """GET ``url`` and return the response body.

        Raises FontFetchError on network failures and non-2xx responses.
        """
        if not url:
            msg = "No font file URL to fetch"
            raise FontFetchError(msg)
        try:
            req = Request(url, method="GET")
            with self._opener.open(req, timeout=self.timeout) as resp:
                data = resp.read()
        except HTTPError as e:
            msg = f"Font file request returned HTTP {e.code}: {url}"
            raise FontFetchError(msg) from e
        except (URLError, HTTPException, OSError, ValueError) as e:
            msg = f"Font file request failed for {url}: {e}"
            raise FontFetchError(msg) from e

        logger.info("Downloaded %d bytes from %s", len(data), url)
        return data
