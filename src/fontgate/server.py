"""HTTP server for the Font Gateway.

Serves a single endpoint:
- GET /fonts             : JSON array of the font catalog
- GET /fonts?font=Family : PNG sample of the family name in its own font

Each connection is handled on its own thread (ThreadingHTTPServer). The
gateway (catalog + font cache) hangs off the server instance.
"""

from __future__ import annotations

import json
import logging
import sys
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import parse_qs, urlsplit

from fontgate.config import DEFAULT_PORT, FONT_QUERY_PARAM, FONTS_PATH
from fontgate.errors import FontGateError
from fontgate.gateway import FontGateway

logger = logging.getLogger("fontgate.server")


# ---------------------------------------------------------------------------
# Response helpers (work with any BaseHTTPRequestHandler subclass)
# ---------------------------------------------------------------------------


def send_bytes(
    handler: BaseHTTPRequestHandler,
    body: bytes,
    content_type: str,
    status: int = 200,
) -> None:
    """Send ``body`` with Content-Type and Content-Length headers."""
    handler.send_response(status)
    handler.send_header("Content-Type", content_type)
    handler.send_header("Content-Length", str(len(body)))
    handler.end_headers()
    if handler.command != "HEAD":
        handler.wfile.write(body)


def json_response(handler: BaseHTTPRequestHandler, data: Any, status: int = 200) -> None:
    body = json.dumps(data, ensure_ascii=False).encode("utf-8")
    send_bytes(handler, body, "application/json", status)


def text_error(handler: BaseHTTPRequestHandler, message: str, status: int) -> None:
    """Send a short plain-text error body."""
    send_bytes(handler, f"{message}\n".encode(), "text/plain; charset=utf-8", status)


# ---------------------------------------------------------------------------
# Server and handler
# ---------------------------------------------------------------------------


class FontGatewayServer(ThreadingHTTPServer):
    """Threaded HTTP server carrying the shared :class:`FontGateway`."""

    daemon_threads = True

    def __init__(self, server_address, gateway: FontGateway, handler_class=None):
        self.gateway = gateway
        super().__init__(server_address, handler_class or FontGatewayHandler)


class FontGatewayHandler(BaseHTTPRequestHandler):
    """Routes GET /fonts to catalog listing or sample rendering."""

    server: FontGatewayServer
    server_version = "fontgate/0.1.0"

    def end_headers(self):
        self.send_header("X-Content-Type-Options", "nosniff")
        super().end_headers()

    def do_GET(self):
        url = urlsplit(self.path)
        if url.path != FONTS_PATH:
            text_error(self, "Not Found", 404)
            return

        # first value as sent; "?font=&font=X" still means "no family"
        values = parse_qs(url.query, keep_blank_values=True).get(FONT_QUERY_PARAM, [])
        family = values[0] if values else ""
        if not family:
            self._handle_list_catalog()
        else:
            self._handle_render(family)

    # HEAD runs the full GET path, so it can trigger an upstream font download
    do_HEAD = do_GET

    def _handle_list_catalog(self):
        json_response(self, self.server.gateway.list_catalog())

    def _handle_render(self, family: str):
        try:
            png = self.server.gateway.render(family)
        except FontGateError as e:
            if e.http_status >= 500:
                logger.error("Render failed for %s: %s", family, e.message)
                text_error(self, "Internal server error", e.http_status)
            else:
                text_error(self, "Font not found", e.http_status)
            return
        except Exception:
            logger.exception("Unexpected error rendering %s", family)
            text_error(self, "Internal server error", 500)
            return

        send_bytes(self, png, "image/png")

    def log_message(self, fmt, *args):
        sys.stderr.write(f"[serve] {fmt % args}\n")


def make_server(
    gateway: FontGateway, host: str = "", port: int = DEFAULT_PORT
) -> FontGatewayServer:
    return FontGatewayServer((host, port), gateway)


def serve_forever(server: FontGatewayServer) -> None:
    """Run ``server`` until interrupted, then close its socket."""
    host = server.server_address[0]
    if host in ("", "0.0.0.0"):
        host = "localhost"
    print(f"Server is listening on http://{host}:{server.server_address[1]}{FONTS_PATH}")
    print("Press Ctrl+C to stop\n")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down.")
    finally:
        server.server_close()
