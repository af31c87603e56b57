from __future__ import annotations

"""
Integration tests for the Development HTTP Server.

Starts a real server on an ephemeral port and talks to it over HTTP.
"""

import json
import urllib.error
import urllib.request
from typing import Iterator

import pytest

from sitesmith.infra.output import MemoryOutput
from sitesmith.infra.server import LIVE_RELOAD_SNIPPET, VERSION_ENDPOINT, DevServer, inject_live_reload


@pytest.fixture
def server() -> Iterator[DevServer]:
    output = MemoryOutput()
    output.write("index.html", b"<html><body><h1>Home</h1></body></html>")
    output.write("blog/index.html", b"<p>Blog</p>")
    output.write("assets/css/app.css", b"body{margin:0}")
    srv = DevServer(output, "127.0.0.1", 0)
    srv.start()
    yield srv
    srv.stop()


def _get(srv: DevServer, path: str):
    return urllib.request.urlopen(srv.url.rstrip("/") + path, timeout=5)


def test_root_serves_index_with_live_reload(server: DevServer) -> None:
    with _get(server, "/") as resp:
        body = resp.read().decode("utf-8")
        assert resp.headers["Content-Type"].startswith("text/html")

    assert "<h1>Home</h1>" in body
    assert body.index(LIVE_RELOAD_SNIPPET) < body.index("</body>")


def test_directory_falls_back_to_index(server: DevServer) -> None:
    with _get(server, "/blog/") as resp:
        assert "<p>Blog</p>" in resp.read().decode("utf-8")
    with _get(server, "/blog") as resp:
        assert "<p>Blog</p>" in resp.read().decode("utf-8")


def test_assets_are_served_verbatim(server: DevServer) -> None:
    with _get(server, "/assets/css/app.css") as resp:
        assert resp.read() == b"body{margin:0}"
        assert resp.headers["Content-Type"].startswith("text/css")


def test_missing_path_is_404(server: DevServer) -> None:
    with pytest.raises(urllib.error.HTTPError) as exc_info:
        _get(server, "/nope.html")

    assert exc_info.value.code == 404


def test_version_endpoint_tracks_reload(server: DevServer) -> None:
    with _get(server, VERSION_ENDPOINT) as resp:
        assert json.loads(resp.read()) == {"version": 0}

    server.reload()

    with _get(server, VERSION_ENDPOINT) as resp:
        assert json.loads(resp.read()) == {"version": 1}


def test_inject_without_body_tag_appends() -> None:
    assert inject_live_reload(b"<p>x</p>").startswith(b"<p>x</p><script>")
