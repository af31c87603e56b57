from __future__ import annotations

"""
Development HTTP Server.

Serves the build output (from disk or from memory) with a tiny live-reload
hook: HTML responses get a script that polls a version endpoint, and
reload() bumps that version after each rebuild.
"""

import json
import logging
import mimetypes
import posixpath
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional, Tuple
from urllib.parse import unquote, urlsplit

from sitesmith.infra.output import OutputTarget

logger = logging.getLogger(__name__)

VERSION_ENDPOINT = "/__sitesmith__/version"

LIVE_RELOAD_SNIPPET = (
    "<script>(function(){var v=null;setInterval(function(){"
    "fetch('" + VERSION_ENDPOINT + "').then(function(r){return r.json();})"
    ".then(function(d){if(v===null){v=d.version;}else if(d.version!==v){location.reload();}})"
    ".catch(function(){});},1000);})();</script>"
)


class DevServer:
    """
    Threaded HTTP server bound to an OutputTarget.

    Attributes:
        output: Artifact source.
        version: Live-reload counter, incremented by reload().
    """

    def __init__(self, output: OutputTarget, host: str = "127.0.0.1", port: int = 3000) -> None:
        self.output = output
        self.version = 0
        self._lock = threading.Lock()
        self._httpd = ThreadingHTTPServer((host, port), _make_handler(self))
        self._httpd.daemon_threads = True
        self._thread: Optional[threading.Thread] = None

    @property
    def address(self) -> Tuple[str, int]:
        host, port = self._httpd.server_address[:2]
        return str(host), int(port)

    @property
    def url(self) -> str:
        host, port = self.address
        return f"http://{host}:{port}/"

    def reload(self) -> int:
        """Signal connected browsers to reload."""
        with self._lock:
            self.version += 1
            logger.debug(f"Live reload version {self.version}")
            return self.version

    def current_version(self) -> int:
        with self._lock:
            return self.version

    def start(self) -> None:
        self._thread = threading.Thread(target=self._httpd.serve_forever, name="DevServer", daemon=True)
        self._thread.start()
        logger.info(f"Serving {self.output.describe()} at {self.url}")

    def stop(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()
        if self._thread:
            self._thread.join()
            self._thread = None

    def resolve(self, url_path: str) -> Tuple[Optional[str], Optional[bytes]]:
        """Map a request path to (output path, content), with index.html fallback."""
        path = posixpath.normpath(unquote(urlsplit(url_path).path))
        rel = path.lstrip("/")
        if rel in ("", "."):
            rel = "index.html"
        candidates = [rel] if not url_path.endswith("/") else []
        candidates.append(posixpath.join(rel, "index.html") if rel != "index.html" else rel)
        for candidate in candidates:
            try:
                data = self.output.read(candidate)
            except ValueError:
                return None, None
            if data is not None:
                return candidate, data
        return None, None


def inject_live_reload(html: bytes) -> bytes:
    """Insert the live-reload snippet before </body>, or append it."""
    snippet = LIVE_RELOAD_SNIPPET.encode("utf-8")
    idx = html.lower().rfind(b"</body>")
    if idx == -1:
        return html + snippet
    return html[:idx] + snippet + html[idx:]


def _make_handler(server: DevServer) -> type:
    class _Handler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802
            if urlsplit(self.path).path == VERSION_ENDPOINT:
                body = json.dumps({"version": server.current_version()}).encode("utf-8")
                self._send(200, "application/json", body)
                return

            rel, data = server.resolve(self.path)
            if rel is None or data is None:
                self._send(404, "text/plain; charset=utf-8", b"Not Found")
                return

            ctype = mimetypes.guess_type(rel)[0] or "application/octet-stream"
            if ctype == "text/html":
                data = inject_live_reload(data)
                ctype = "text/html; charset=utf-8"
            self._send(200, ctype, data)

        def _send(self, status: int, ctype: str, body: bytes) -> None:
            self.send_response(status)
            self.send_header("Content-Type", ctype)
            self.send_header("Content-Length", str(len(body)))
            self.send_header("Cache-Control", "no-store")
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format: str, *args: object) -> None:  # noqa: A002
            logger.debug("%s - %s", self.address_string(), format % args)

    return _Handler
