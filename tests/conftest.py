"""Shared fixtures for fontgate tests."""

import io
import json
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from fontgate.catalog import Catalog
from fontgate.gateway import FontGateway
from fontgate.schema import CatalogEntry

# -- Font fixtures ----------------------------------------------------------


def _box_glyph():
    pen = TTGlyphPen(None)
    pen.moveTo((50, 0))
    pen.lineTo((50, 700))
    pen.lineTo((450, 700))
    pen.lineTo((450, 0))
    pen.closePath()
    return pen.glyph()


def build_test_font(family: str = "Box Test") -> bytes:
    """Build a tiny TrueType font where every printable ASCII char is a box."""
    codepoints = list(range(33, 127))
    names = [f"uni{cp:04X}" for cp in codepoints]
    glyph_order = [".notdef", "space", *names]

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({32: "space", **dict(zip(codepoints, names))})

    empty = TTGlyphPen(None).glyph()
    glyphs = {name: _box_glyph() for name in names}
    glyphs[".notdef"] = _box_glyph()
    glyphs["space"] = empty
    fb.setupGlyf(glyphs)

    glyf = fb.font["glyf"]
    fb.setupHorizontalMetrics({name: (500, getattr(glyf[name], "xMin", 0)) for name in glyph_order})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": family, "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()

    buf = io.BytesIO()
    fb.save(buf)
    return buf.getvalue()


@pytest.fixture(scope="session")
def font_bytes():
    """Raw bytes of a valid TrueType font covering printable ASCII."""
    return build_test_font()


# -- Catalog fixtures -------------------------------------------------------

ROBOTO_URL = "https://fonts.example/Roboto.ttf"
LOBSTER_URL = "https://fonts.example/Lobster.ttf"


@pytest.fixture()
def catalog_data():
    """A webfonts list response in the Google Fonts API shape."""
    return {
        "kind": "webfonts#webfontList",
        "items": [
            {
                "family": "Roboto",
                "variants": ["regular", "italic", "700"],
                "subsets": ["latin", "cyrillic"],
                "version": "v30",
                "lastModified": "2022-09-22",
                "files": {
                    "regular": ROBOTO_URL,
                    "italic": "https://fonts.example/Roboto-Italic.ttf",
                    "700": "https://fonts.example/Roboto-Bold.ttf",
                },
                "category": "sans-serif",
                "kind": "webfonts#webfont",
                "menu": "https://fonts.example/Roboto-menu.ttf",
            },
            {
                "family": "Lobster",
                "variants": ["regular"],
                "subsets": ["latin"],
                "version": "v28",
                "lastModified": "2022-04-27",
                "files": {"regular": LOBSTER_URL},
                "category": "display",
                "kind": "webfonts#webfont",
                "menu": "https://fonts.example/Lobster-menu.ttf",
            },
        ],
    }


@pytest.fixture()
def catalog(catalog_data):
    return Catalog(CatalogEntry.model_validate(item) for item in catalog_data["items"])


class RecordingFetcher:
    """Stands in for FontFileFetcher: serves fixed bytes and records URLs."""

    def __init__(self, data: bytes, fail: Exception | None = None):
        self.data = data
        self.fail = fail
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, url: str) -> bytes:
        with self._lock:
            self.calls.append(url)
        if self.fail is not None:
            raise self.fail
        return self.data


@pytest.fixture()
def fetcher(font_bytes):
    return RecordingFetcher(font_bytes)


@pytest.fixture()
def gateway(catalog, fetcher):
    return FontGateway(catalog, fetch=fetcher)


# -- Local HTTP upstream ----------------------------------------------------


class Upstream:
    """Records request paths for a local test HTTP server."""

    def __init__(self, server: ThreadingHTTPServer):
        self.server = server
        self.paths: list[str] = []
        self.routes: dict[str, tuple[int, dict[str, str], bytes]] = {}

    @property
    def base_url(self) -> str:
        host, port = self.server.server_address[:2]
        return f"http://{host}:{port}"

    def route(self, path: str, status: int = 200, body: bytes = b"", headers=None):
        self.routes[path] = (status, headers or {}, body)

    def route_json(self, path: str, data, status: int = 200):
        self.route(path, status, json.dumps(data).encode(), {"Content-Type": "application/json"})


def _upstream_handler(upstream: Upstream):
    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            upstream.paths.append(self.path)
            key = self.path if self.path in upstream.routes else self.path.split("?", 1)[0]
            status, headers, body = upstream.routes.get(key, (404, {}, b"missing"))
            self.send_response(status)
            for k, v in headers.items():
                self.send_header(k, v)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, fmt, *args):
            pass

    return Handler


@pytest.fixture()
def upstream():
    """A local HTTP server standing in for the catalog API and font CDN."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), BaseHTTPRequestHandler)
    up = Upstream(server)
    server.RequestHandlerClass = _upstream_handler(up)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield up
    server.shutdown()
    server.server_close()


@pytest.fixture()
def unused_url():
    """A URL on a local port with nothing listening."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}/nothing"
