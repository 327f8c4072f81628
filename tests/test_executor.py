"""Tests for the request executor: auth, bodies, pagination and errors."""

import base64
import json

import httpx
import pytest

from wpgate.framework.errors import TransportFailure, UpstreamApiError, ValidationFailure
from wpgate.wordpress.auth import Credential, basic_auth_header
from wpgate.wordpress.executor import (
    MediaUpload,
    RequestExecutor,
    RequestSpec,
    extract_error_message,
    parse_total_header,
)

API_BASE = "https://blog.example.com/wp-json/wp/v2"


def _executor(handler, credential: Credential) -> RequestExecutor:
    return RequestExecutor(API_BASE, credential, transport=httpx.MockTransport(handler))


class TestBasicAuth:
    def test_header_value(self) -> None:
        header = basic_auth_header(Credential("admin", "pw"))
        assert header == "Basic " + base64.b64encode(b"admin:pw").decode()

    def test_secret_not_in_repr(self) -> None:
        assert "hunter2" not in repr(Credential("admin", "hunter2"))


class TestPagination:
    """Test x-wp-total / x-wp-totalpages handling."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("42", 42),
            (" 7 ", 7),
            (None, 0),
            ("", 0),
            ("abc", 0),
            ("-3", 0),
            ("4_2", 0),
            ("\uff14\uff12", 0),
            ("+5", 0),
        ],
    )
    def test_parse_total_header(self, value, expected) -> None:
        assert parse_total_header(value) == expected

    @pytest.mark.asyncio
    async def test_list_result_carries_totals(self, credential) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json=[{"id": 1}, {"id": 2}],
                headers={"X-WP-Total": "57", "X-WP-TotalPages": "29"},
            )

        async with _executor(handler, credential) as executor:
            result = await executor.execute_with_metadata(RequestSpec("/posts"))

        assert [item["id"] for item in result.items] == [1, 2]
        assert result.total == 57
        assert result.total_pages == 29

    @pytest.mark.asyncio
    async def test_malformed_headers_are_zero(self, credential) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[], headers={"X-WP-Total": "lots"})

        async with _executor(handler, credential) as executor:
            result = await executor.execute_with_metadata(RequestSpec("/posts"))

        assert result.items == []
        assert result.total == 0
        assert result.total_pages == 0


class TestErrorNormalization:
    """Test message extraction priority: message, then code, then raw body."""

    def test_message_wins(self) -> None:
        body = json.dumps({"code": "rest_forbidden", "message": "Sorry, you are not allowed."})
        assert extract_error_message(body) == "Sorry, you are not allowed."

    def test_code_when_no_message(self) -> None:
        assert extract_error_message(json.dumps({"code": "rest_post_invalid_id"})) == (
            "rest_post_invalid_id"
        )

    def test_raw_body_when_not_json(self) -> None:
        assert extract_error_message("<html>Bad Gateway</html>") == "<html>Bad Gateway</html>"

    @pytest.mark.asyncio
    async def test_non_success_raises_upstream_error(self, credential) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                404, json={"code": "rest_post_invalid_id", "message": "Invalid post ID."}
            )

        async with _executor(handler, credential) as executor:
            with pytest.raises(UpstreamApiError) as exc_info:
                await executor.execute(RequestSpec("/posts/999"))

        error = exc_info.value
        assert error.upstream_status == 404
        assert error.upstream_message == "Invalid post ID."
        assert str(error) == "WordPress API error (404): Invalid post ID."

    @pytest.mark.asyncio
    async def test_transport_failure_is_distinct(self, credential) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _executor(handler, credential) as executor:
            with pytest.raises(TransportFailure):
                await executor.execute(RequestSpec("/posts"))


class TestRequestConstruction:
    @pytest.mark.asyncio
    async def test_auth_header_on_every_call(self, credential) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers.get("authorization"))
            return httpx.Response(200, json={})

        async with _executor(handler, credential) as executor:
            await executor.execute(RequestSpec("/posts/1"))
            await executor.execute(RequestSpec("/posts", method="POST", json={"title": "x"}))
            await executor.execute(RequestSpec("/posts/1", method="DELETE"))

        assert seen == [credential.authorization_header()] * 3

    @pytest.mark.asyncio
    async def test_caller_headers_cannot_replace_authorization(self, credential) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["authorization"] == credential.authorization_header()
            assert request.headers["x-trace"] == "abc"
            return httpx.Response(200, json={})

        spec = RequestSpec(
            "/posts", headers={"Authorization": "Bearer stolen", "X-Trace": "abc"}
        )
        async with _executor(handler, credential) as executor:
            await executor.execute(spec)

    @pytest.mark.asyncio
    async def test_json_body(self, credential) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            assert request.headers["content-type"] == "application/json"
            assert json.loads(request.content) == {"title": "Hello"}
            return httpx.Response(201, json={"id": 5})

        async with _executor(handler, credential) as executor:
            body = await executor.execute(RequestSpec("/posts", "post", json={"title": "Hello"}))

        assert body == {"id": 5}

    @pytest.mark.asyncio
    async def test_multipart_upload(self, credential) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            content_type = request.headers["content-type"]
            assert content_type.startswith("multipart/form-data; boundary=")
            body = request.content
            assert b'name="file"; filename="cat.png"' in body
            assert b"\x89PNG" in body
            assert b'name="title"' in body
            assert request.headers["authorization"] == credential.authorization_header()
            return httpx.Response(201, json={"id": 77})

        upload = MediaUpload(content=b"\x89PNG...", filename="cat.png", content_type="image/png")
        spec = RequestSpec("/media", method="POST", upload=upload, form={"title": "Cat"})
        async with _executor(handler, credential) as executor:
            body = await executor.execute(spec)

        assert body == {"id": 77}

    @pytest.mark.asyncio
    async def test_absolute_targets_pass_through(self, credential) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == "https://blog.example.com/wp-json"
            return httpx.Response(200, json={"name": "Blog"})

        async with _executor(handler, credential) as executor:
            body = await executor.execute(RequestSpec("https://blog.example.com/wp-json"))

        assert body == {"name": "Blog"}

    def test_rejects_unknown_method(self) -> None:
        with pytest.raises(ValueError, match="method"):
            RequestSpec("/posts", method="PUT")

    @pytest.mark.asyncio
    async def test_empty_body_decodes_to_none(self, credential) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(204)

        async with _executor(handler, credential) as executor:
            assert await executor.execute(RequestSpec("/posts/1", method="DELETE")) is None


class TestDownload:
    @pytest.mark.asyncio
    async def test_filename_from_url_path(self, credential) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert "authorization" not in request.headers
            return httpx.Response(
                200, content=b"GIF89a", headers={"content-type": "image/gif; charset=binary"}
            )

        async with _executor(handler, credential) as executor:
            upload = await executor.download("https://cdn.example.org/img/party%20cat.gif?x=1")

        assert upload.filename == "party cat.gif"
        assert upload.content_type == "image/gif"
        assert upload.content == b"GIF89a"

    @pytest.mark.asyncio
    async def test_fallback_filename(self, credential) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"data")

        async with _executor(handler, credential) as executor:
            upload = await executor.download("https://cdn.example.org/")

        assert upload.filename == "uploaded-file"

    @pytest.mark.asyncio
    async def test_failed_fetch(self, credential) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        async with _executor(handler, credential) as executor:
            with pytest.raises(ValidationFailure, match="Status: 404"):
                await executor.download("https://cdn.example.org/missing.png")

    @pytest.mark.asyncio
    async def test_rejects_non_http_scheme(self, credential) -> None:
        async with _executor(lambda request: httpx.Response(200), credential) as executor:
            with pytest.raises(ValidationFailure):
                await executor.download("file:///etc/passwd")
