"""
Unit tests for the static file handler.

Requests are built by hand, the way the router hands them over: raw_path
as received and matched_path set to the route pattern.
"""

import json

import pytest

from fileserver import FileServerConfig, RedirectError, StaticFileHandler, serve_static
from fileserver.files.headers import CacheHeadersSetter, ResponseHeadersSetter
from fileserver.files.partial import PartialContentSerializer
from fileserver.handlers import static
from fileserver.http import HTTPRequest, HTTPStatus


class RecordingSetter(ResponseHeadersSetter):
    """Records calls and the headers present at call time."""

    def __init__(self, content_type=None):
        self.calls = []
        self.content_type = content_type

    def set_custom_response_headers(self, response, file_path, file_info):
        self.calls.append((file_path, file_info, dict(response.headers)))
        if self.content_type:
            response.set_header("Content-Type", self.content_type)
        response.set_header("X-Served-By", "test")


class TestFullBody:
    """GET without Range."""

    def test_serves_file(self, handler, make_request, sample_bytes):
        response = handler.handle(make_request("/static/data.bin"))

        assert response.status == HTTPStatus.OK
        assert response.body == sample_bytes
        assert response.headers["Accept-Ranges"] == "bytes"
        assert response.headers["Content-Type"] == "application/octet-stream"

    def test_text_type_has_charset(self, handler, make_request):
        response = handler.handle(make_request("/static/style.css"))

        assert response.headers["Content-Type"] == "text/css; charset=utf-8"
        assert response.body == b"body { color: red; }"

    def test_index_served_for_trailing_slash(self, handler, make_request):
        response = handler.handle(make_request("/static/docs/"))

        assert response.status == HTTPStatus.OK
        assert response.body == b"<h1>docs</h1>"

    def test_root_index(self, handler, make_request):
        response = handler.handle(make_request("/static/"))
        assert response.body == b"<h1>home</h1>"

    def test_percent_encoded_name(self, handler, make_request, serving_root):
        (serving_root / "my clip.txt").write_text("clip")

        response = handler.handle(make_request("/static/my%20clip.txt"))

        assert response.body == b"clip"

    def test_root_mount(self, handler, make_request):
        response = handler.handle(make_request("/data.bin", matched_path="/*path"))
        assert response.status == HTTPStatus.OK

    def test_encoded_mount_prefix(self, handler, sample_bytes):
        """Routed on the decoded path, resolved from the raw one."""
        request = HTTPRequest(
            method="GET",
            path="/static/data.bin",
            raw_path="/st%61tic/data.bin",
            headers={},
            matched_path="/static/*path",
        )

        response = handler.handle(request)

        assert response.status == HTTPStatus.OK
        assert response.body == sample_bytes


class TestDeclined:
    """Cases where the handler returns None."""

    def test_missing_file(self, handler, make_request):
        assert handler.handle(make_request("/static/missing.txt")) is None

    def test_outside_prefix(self, handler, make_request):
        assert handler.handle(make_request("/other/data.bin")) is None

    @pytest.mark.parametrize("path", [
        "/static/../www-evil/secret.txt",
        "/static/..%2Fwww-evil%2Fsecret.txt",
        "/static/..%2F..%2F..%2F..%2F..%2Fetc%2Fpasswd",
    ])
    def test_traversal_looks_like_missing(self, handler, make_request, path):
        assert handler.handle(make_request(path)) is None

    def test_unsafe_directory_is_not_redirected(self, handler, make_request):
        """The safety check runs before the directory check."""
        assert handler.handle(make_request("/static/..%2Fwww-evil")) is None

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "OPTIONS"])
    def test_other_methods(self, handler, make_request, method):
        assert handler.handle(make_request("/static/data.bin", method=method)) is None

    def test_directory_index_disabled(self, serving_root, make_request):
        handler = StaticFileHandler(FileServerConfig(
            serving_root=str(serving_root),
            serve_index_for_directory=False,
        ))
        assert handler.handle(make_request("/static/docs/")) is None

    def test_directory_without_index_file(self, handler, make_request):
        assert handler.handle(make_request("/static/empty/")) is None


class TestDirectoryRedirect:

    def test_redirect_to_slash(self, handler, make_request):
        response = handler.handle(make_request("/static/docs"))

        assert response.status == HTTPStatus.FOUND
        assert response.headers["Location"] == "/static/docs/"

    def test_mount_point_without_slash(self, handler, make_request):
        response = handler.handle(make_request("/static"))
        assert response.headers["Location"] == "/static/"

    def test_redirect_disabled(self, serving_root, make_request):
        handler = StaticFileHandler(FileServerConfig(
            serving_root=str(serving_root),
            redirect_on_directory=False,
        ))
        assert handler.handle(make_request("/static/docs")) is None

    def test_unsendable_redirect_raises(self, serving_root, make_request):
        (serving_root / "odd\rname").mkdir()

        handler = StaticFileHandler(FileServerConfig(serving_root=str(serving_root)))
        with pytest.raises(RedirectError):
            handler.handle(make_request("/static/odd\rname"))


class TestExtensionFallback:

    def test_clean_url(self, serving_root, make_request):
        handler = StaticFileHandler(FileServerConfig(
            serving_root=str(serving_root),
            possible_extensions=("html", "htm"),
        ))

        response = handler.handle(make_request("/static/page"))

        assert response.body == b"<p>htm page</p>"
        assert response.headers["Content-Type"] == "text/html; charset=utf-8"

    def test_first_extension_wins(self, serving_root, make_request):
        (serving_root / "index.htm").write_text("<p>htm</p>")
        handler = StaticFileHandler(FileServerConfig(
            serving_root=str(serving_root),
            possible_extensions=("html", "htm"),
        ))

        response = handler.handle(make_request("/static/index"))

        assert response.body == b"<h1>home</h1>"

    def test_no_extensions(self, handler, make_request):
        assert handler.handle(make_request("/static/page")) is None


class TestRanges:
    """GET with a Range header."""

    def test_single_range(self, handler, make_request, sample_bytes):
        response = handler.handle(
            make_request("/static/data.bin", range_header="bytes=100-199")
        )

        assert response.status == HTTPStatus.PARTIAL_CONTENT
        assert response.headers["Content-Range"] == "bytes 100-199/1000"
        assert response.headers["Content-Type"] == "application/octet-stream"
        assert response.headers["Accept-Ranges"] == "bytes"
        assert response.body == sample_bytes[100:200]

    def test_suffix_range(self, handler, make_request, sample_bytes):
        response = handler.handle(make_request("/static/data.bin", range_header="bytes=-10"))
        assert response.body == sample_bytes[-10:]

    def test_multipart(self, serving_root, make_request, sample_bytes):
        handler = StaticFileHandler(
            FileServerConfig(serving_root=str(serving_root)),
            serializer=PartialContentSerializer(boundary_factory=lambda: "B"),
        )

        response = handler.handle(
            make_request("/static/data.bin", range_header="bytes=0-1,10-11")
        )

        assert response.status == HTTPStatus.PARTIAL_CONTENT
        assert response.headers["Content-Type"] == "multipart/byteranges; boundary=B"
        assert response.body == (
            b"--B\r\nContent-Range: bytes 0-1/1000\r\n"
            b"Content-Type: application/octet-stream\r\n\r\n"
            + sample_bytes[0:2] + b"\r\n"
            b"--B\r\nContent-Range: bytes 10-11/1000\r\n"
            b"Content-Type: application/octet-stream\r\n\r\n"
            + sample_bytes[10:12] + b"\r\n"
            b"--B--"
        )

    def test_unsatisfiable_range_serves_full_body(self, handler, make_request, sample_bytes):
        response = handler.handle(
            make_request("/static/data.bin", range_header="bytes=5000-6000")
        )

        assert response.status == HTTPStatus.OK
        assert response.body == sample_bytes
        assert "Content-Range" not in response.headers

    def test_garbage_range_serves_full_body(self, handler, make_request):
        response = handler.handle(make_request("/static/data.bin", range_header="bytes=abc"))
        assert response.status == HTTPStatus.OK

    def test_oversized_range_serves_full_body(self, handler, make_request, sample_bytes):
        response = handler.handle(
            make_request("/static/data.bin", range_header="bytes=0-" + "9" * 5000)
        )

        assert response.status == HTTPStatus.OK
        assert response.body == sample_bytes

    def test_ranges_disabled(self, serving_root, make_request, sample_bytes):
        handler = StaticFileHandler(FileServerConfig(
            serving_root=str(serving_root),
            accept_ranges=False,
        ))

        response = handler.handle(make_request("/static/data.bin", range_header="bytes=0-9"))

        assert response.status == HTTPStatus.OK
        assert response.body == sample_bytes
        assert response.headers["Accept-Ranges"] == "none"

    def test_head_never_partial(self, handler, make_request):
        """HEAD with a valid Range still answers 200 with the full length."""
        response = handler.handle(
            make_request("/static/data.bin", method="HEAD", range_header="bytes=0-9")
        )

        assert response.status == HTTPStatus.OK
        assert response.headers["Content-Length"] == "1000"
        assert "Content-Range" not in response.headers
        assert response.body == b""


class TestHead:

    def test_head(self, handler, make_request):
        response = handler.handle(make_request("/static/style.css", method="HEAD"))

        assert response.status == HTTPStatus.OK
        assert response.headers["Content-Length"] == str(len("body { color: red; }"))
        assert response.headers["Content-Type"] == "text/css; charset=utf-8"
        assert response.headers["Accept-Ranges"] == "bytes"
        assert response.body == b""


class TestHeadersHook:
    """The per-file header customization hook."""

    def test_called_once_after_accept_ranges(self, serving_root, make_request):
        setter = RecordingSetter()
        handler = StaticFileHandler(
            FileServerConfig(serving_root=str(serving_root)),
            headers_setter=setter,
        )

        response = handler.handle(make_request("/static/data.bin"))

        assert len(setter.calls) == 1
        file_path, file_info, seen_headers = setter.calls[0]
        assert file_path == f"{serving_root}/data.bin"
        assert file_info.size == 1000
        assert seen_headers == {"Accept-Ranges": "bytes"}
        assert response.headers["X-Served-By"] == "test"

    def test_called_for_ranges_and_head(self, serving_root, make_request):
        setter = RecordingSetter()
        handler = StaticFileHandler(
            FileServerConfig(serving_root=str(serving_root)),
            headers_setter=setter,
        )

        handler.handle(make_request("/static/data.bin", range_header="bytes=0-9"))
        handler.handle(make_request("/static/data.bin", method="HEAD"))

        assert len(setter.calls) == 2

    def test_not_called_when_declined(self, serving_root, make_request):
        setter = RecordingSetter()
        handler = StaticFileHandler(
            FileServerConfig(serving_root=str(serving_root)),
            headers_setter=setter,
        )

        handler.handle(make_request("/static/missing.txt"))
        handler.handle(make_request("/static/docs"))

        assert setter.calls == []

    def test_hook_content_type_wins(self, serving_root, make_request):
        handler = StaticFileHandler(
            FileServerConfig(serving_root=str(serving_root)),
            headers_setter=RecordingSetter(content_type="video/mp4"),
        )

        full = handler.handle(make_request("/static/data.bin"))
        partial = handler.handle(make_request("/static/data.bin", range_header="bytes=0-9"))

        assert full.headers["Content-Type"] == "video/mp4"
        assert partial.headers["Content-Type"] == "video/mp4"

    def test_cache_headers(self, serving_root, make_request):
        handler = StaticFileHandler(
            FileServerConfig(serving_root=str(serving_root)),
            headers_setter=CacheHeadersSetter(max_age=60),
        )

        response = handler.handle(make_request("/static/data.bin"))

        assert response.headers["Cache-Control"] == "public, max-age=60"
        assert response.headers["ETag"].startswith('W/"')
        assert "Last-Modified" in response.headers


class TestContentTypeLookup:

    def test_no_lookup_omits_header(self, serving_root, make_request):
        handler = StaticFileHandler(
            FileServerConfig(serving_root=str(serving_root)),
            content_type_lookup=None,
        )

        response = handler.handle(make_request("/static/style.css"))

        assert "Content-Type" not in response.headers

    def test_lookup_returning_none(self, serving_root, make_request):
        handler = StaticFileHandler(
            FileServerConfig(serving_root=str(serving_root)),
            content_type_lookup=lambda path: None,
        )

        response = handler.handle(make_request("/static/data.bin", range_header="bytes=0-1,2-3"))

        assert b"Content-Type" not in response.body

    def test_custom_lookup(self, serving_root, make_request):
        handler = StaticFileHandler(
            FileServerConfig(serving_root=str(serving_root)),
            content_type_lookup=lambda path: "x-test/custom",
        )

        response = handler.handle(make_request("/static/data.bin"))

        assert response.headers["Content-Type"] == "x-test/custom"


class TestReadFailure:

    def test_unreadable_file_is_500(self, handler, make_request, monkeypatch):
        def broken_open(*args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr(static, "open", broken_open, raising=False)

        response = handler.handle(make_request("/static/data.bin"))

        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert json.loads(response.body) == {"error": "Failed to read file"}


class TestRespond:

    def test_missing_is_404(self, handler, make_request):
        response = handler.respond(make_request("/static/missing.txt"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert json.loads(response.body) == {"error": "File not found: /static/missing.txt"}

    def test_found_passes_through(self, handler, make_request):
        assert handler(make_request("/static/index.html")).status == HTTPStatus.OK


class TestServeStatic:

    def test_builds_handler(self, serving_root, make_request):
        handler = serve_static(str(serving_root), possible_extensions=(".html",))

        assert handler.config.possible_extensions == ("html",)
        assert handler.handle(make_request("/static/index")).status == HTTPStatus.OK

    def test_missing_root(self, tmp_path):
        with pytest.raises(ValueError):
            serve_static(str(tmp_path / "nope"))
