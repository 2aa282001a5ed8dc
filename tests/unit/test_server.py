"""
Unit tests for HTTPServer request handling (no listening socket).
"""

import json
import logging
import socket
from pathlib import Path

import pytest

from tinyserve import HTTPServer, ServerConfig
from tinyserve.core import Connection
from tinyserve.http.request import HTTPRequest


@pytest.fixture
def server(config: ServerConfig) -> HTTPServer:
    return HTTPServer(config)


def split_response(data: bytes):
    head, _, body = data.partition(b"\r\n\r\n")
    lines = head.decode("iso-8859-1").split("\r\n")
    headers = dict(line.split(": ", 1) for line in lines[1:])
    return lines[0], headers, body


class TestDispatch:
    """Tests for method-based dispatch."""

    def test_get_served(self, server: HTTPServer):
        response = server.dispatch(HTTPRequest(method="GET", path="/"))
        assert response.status_code == 200

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "HEAD", "OPTIONS", "PATCH", "BREW"])
    def test_other_methods_405(self, server: HTTPServer, method):
        """Test that every non-GET method gets 405."""
        response = server.dispatch(HTTPRequest(method=method, path="/index.html"))

        assert response.status_code == 405
        assert response.content_type == "text/plain"
        assert response.body == b"Method Not Allowed"

    def test_405_regardless_of_path(self, server: HTTPServer):
        """Test that an invalid path doesn't turn a POST into a 400."""
        response = server.dispatch(HTTPRequest(method="POST", path="/../etc/passwd"))
        assert response.status_code == 405

    def test_server_name_from_config(self, web_root: Path):
        server = HTTPServer(ServerConfig(root_dir=str(web_root), server_name="unit/1"))

        assert server.dispatch(HTTPRequest(method="GET", path="/")).server == "unit/1"
        assert server.dispatch(HTTPRequest(method="PUT", path="/")).server == "unit/1"


class TestHandleRaw:
    """Tests for the bytes-in, bytes-out pipeline."""

    def test_get_index(self, server: HTTPServer, web_root: Path):
        data = server.handle_raw(b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n")
        status_line, headers, body = split_response(data)

        index = (web_root / "index.html").read_bytes()
        assert status_line == "HTTP/1.1 200 OK"
        assert headers["Content-Type"] == "text/html"
        assert headers["Content-Length"] == str(len(index))
        assert headers["Connection"] == "close"
        assert body == index

    def test_header_order(self, server: HTTPServer):
        data = server.handle_raw(b"GET /style.css HTTP/1.1\r\n\r\n")
        _, headers, _ = split_response(data)

        assert list(headers) == ["Date", "Server", "Content-Type", "Content-Length", "Connection"]

    def test_missing_file(self, server: HTTPServer):
        data = server.handle_raw(b"GET /missing.txt HTTP/1.1\r\n\r\n")
        status_line, headers, body = split_response(data)

        assert status_line == "HTTP/1.1 404 Not Found"
        assert headers["Content-Type"] == "text/plain"
        assert body == b"Not Found"

    def test_post(self, server: HTTPServer, sample_post_request: bytes):
        data = server.handle_raw(sample_post_request)
        assert data.startswith(b"HTTP/1.1 405 Method Not Allowed\r\n")

    @pytest.mark.parametrize("raw", [b"", b"\r\n\r\n", b"GET /x", b"GET  HTTP/1.1\r\n\r\n"])
    def test_parse_failure_returns_none(self, server: HTTPServer, raw):
        """Test that unparseable requests get no response at all."""
        assert server.handle_raw(raw) is None

    def test_parse_failure_logged(self, server: HTTPServer, caplog):
        with caplog.at_level(logging.WARNING, logger="tinyserve.server"):
            server.handle_raw(b"GET /x")

        assert "MalformedRequestLine" in caplog.text
        assert "(400 MalformedRequestLine)" in caplog.text

    def test_request_dump_at_debug(self, server: HTTPServer, caplog):
        with caplog.at_level(logging.DEBUG, logger="tinyserve.server"):
            server.handle_raw(b"GET / HTTP/1.1\r\nHost: dump.test\r\n\r\n")

        assert "Host: dump.test" in caplog.text

    def test_header_buffer_grows(self, web_root: Path):
        """Test that a header block bigger than the buffer is still sent whole."""
        server = HTTPServer(ServerConfig(
            root_dir=str(web_root),
            header_buffer_size=64,
            server_name="x" * 300,
        ))

        data = server.handle_raw(b"GET / HTTP/1.1\r\n\r\n")
        _, headers, body = split_response(data)

        assert headers["Server"] == "x" * 300
        assert body == (web_root / "index.html").read_bytes()

    def test_header_buffer_growth_not_shared(self, web_root: Path, monkeypatch):
        """Test that every response starts from the configured buffer size."""
        from tinyserve import server as server_module

        limits = []
        real_serialize = server_module.serialize

        def recording_serialize(response, header_limit=None):
            limits.append(header_limit)
            return real_serialize(response, header_limit)

        monkeypatch.setattr(server_module, "serialize", recording_serialize)

        server = HTTPServer(ServerConfig(
            root_dir=str(web_root),
            header_buffer_size=64,
            server_name="x" * 300,
        ))
        server.handle_raw(b"GET / HTTP/1.1\r\n\r\n")
        first = list(limits)
        limits.clear()
        server.handle_raw(b"GET /style.css HTTP/1.1\r\n\r\n")

        assert first[0] == 64
        assert first[-1] >= 300
        assert limits[0] == 64
        assert server.config.header_buffer_size == 64


class TestProcessConnection:
    """Tests for serving one connection over a socket pair."""

    def _serve(self, server: HTTPServer, raw: bytes) -> bytes:
        client, remote = socket.socketpair()
        try:
            client.sendall(raw)
            client.shutdown(socket.SHUT_WR)

            conn = Connection(socket=remote, address=("127.0.0.1", 50000), timeout=2.0)
            server._process_connection(conn)

            chunks = []
            while True:
                chunk = client.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
            return b"".join(chunks)
        finally:
            client.close()
            remote.close()

    def test_serves_and_closes(self, server: HTTPServer, web_root: Path):
        data = self._serve(server, b"GET /style.css HTTP/1.1\r\n\r\n")

        assert data.startswith(b"HTTP/1.1 200 OK\r\n")
        assert data.endswith((web_root / "style.css").read_bytes())

    def test_parse_failure_closes_silently(self, server: HTTPServer):
        assert self._serve(server, b"garbage\r\n\r\n") == b""

    def test_client_sends_nothing(self, server: HTTPServer):
        assert self._serve(server, b"") == b""

    def test_access_log_text(self, server: HTTPServer, caplog):
        with caplog.at_level(logging.INFO, logger="tinyserve.access"):
            self._serve(server, b"GET /missing.html HTTP/1.1\r\n\r\n")

        records = [r for r in caplog.records if r.name == "tinyserve.access"]
        assert len(records) == 1
        assert '"GET /missing.html" 404 9' in records[0].getMessage()
        assert records[0].getMessage().startswith("127.0.0.1 - - [")

    def test_access_log_json(self, web_root: Path, caplog):
        server = HTTPServer(ServerConfig(root_dir=str(web_root), log_format="json"))

        with caplog.at_level(logging.INFO, logger="tinyserve.access"):
            self._serve(server, b"DELETE /index.html HTTP/1.1\r\n\r\n")

        records = [r for r in caplog.records if r.name == "tinyserve.access"]
        entry = json.loads(records[0].getMessage())
        assert entry["method"] == "DELETE"
        assert entry["path"] == "/index.html"
        assert entry["status"] == 405
        assert entry["client_ip"] == "127.0.0.1"

    def test_no_access_log_for_parse_failure(self, server: HTTPServer, caplog):
        with caplog.at_level(logging.INFO, logger="tinyserve.access"):
            self._serve(server, b"GET /x\r\n\r\n")

        assert not [r for r in caplog.records if r.name == "tinyserve.access"]


class TestServerSetup:
    """Tests for HTTPServer construction."""

    def test_invalid_config_rejected(self, tmp_path: Path):
        with pytest.raises(ValueError):
            HTTPServer(ServerConfig(root_dir=str(tmp_path / "nope")))

    def test_address_before_start(self, server: HTTPServer):
        assert server.address == ("127.0.0.1", 8080)
        assert server.is_running is False
