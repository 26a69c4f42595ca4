"""Tests for wren.server.errors: the 500 and 404 documents."""

from types import SimpleNamespace

from wren.errors import AssetsNotReady, ConfigurationError, WrenError
from wren.http.query import QueryParams
from wren.http.request import Request
from wren.server.errors import NotFoundHandler, error_detail, format_stack, render_error
from wren.templating.templates import Templates

from conftest import MAIN_FILE, build_cache


def _raised(exc: Exception) -> Exception:
    try:
        raise exc
    except Exception as caught:
        return caught


class DetailedError(Exception):
    detail = "more helpful text"


class TestHierarchy:
    def test_wren_errors(self) -> None:
        assert issubclass(ConfigurationError, WrenError)
        assert issubclass(AssetsNotReady, WrenError)


class TestErrorDetail:
    def test_prefers_detail(self) -> None:
        assert error_detail(DetailedError("message")) == "more helpful text"

    def test_message(self) -> None:
        assert error_detail(ValueError("bad value")) == "bad value"

    def test_empty(self) -> None:
        assert error_detail(RuntimeError()) == "Unknown error"


class TestFormatStack:
    def test_frames_listed(self) -> None:
        stack = format_stack(_raised(ValueError("x")))
        assert "_raised" in stack
        assert not stack.endswith("\n")

    def test_unraised(self) -> None:
        assert format_stack(ValueError("x")) == ""


class TestRenderError:
    def test_500_page(self) -> None:
        response = render_error(_raised(ValueError("bad <b>input</b>")), "/blog/x", Templates())

        assert response.status == 500
        assert response.content_type == "text/html"
        assert "<title>ValueError</title>" in response.text
        assert "Error while rendering /blog/x" in response.text
        assert "bad &lt;b&gt;input&lt;/b&gt;" in response.text
        assert "<b>input</b>" not in response.text
        assert "class='stack'" in response.text

    def test_broken_template_falls_back(self, tmp_path) -> None:
        (tmp_path / "5xx.html").write_text("{% if stack %}<p>unterminated")
        response = render_error(_raised(KeyError("k")), "/", Templates(tmp_path))

        assert response.status == 500
        assert "<h1>KeyError</h1>" in response.text


class TestNotFound:
    async def test_404_page(self) -> None:
        cache = build_cache(SimpleNamespace())
        handler = NotFoundHandler(lambda: cache, Templates())
        request = Request(method="PATCH", path="/missing/page", query=QueryParams(b"a=1&b=2"))

        response = await handler(request)

        assert response.status == 404
        assert "<title>Not found</title>" in response.text
        assert "Could not find PATCH /missing/page?a=1&amp;b=2" in response.text
        assert f"<script src='{MAIN_FILE}'></script>" in response.text

    async def test_reads_live_main_file(self) -> None:
        current = {"cache": build_cache(SimpleNamespace())}
        handler = NotFoundHandler(lambda: current["cache"], Templates())

        current["cache"] = build_cache(SimpleNamespace(), main_file="/client/main.next.js")
        response = await handler(Request(method="GET", path="/x"))

        assert "/client/main.next.js" in response.text
