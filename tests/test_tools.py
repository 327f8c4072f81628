"""Tests for the tool catalog and tool handlers, called through the MCP server."""

import json

import httpx
import pytest

from wpgate.framework.errors import ConfigurationError, UpstreamApiError, ValidationFailure
from wpgate.server.mcp_server import GatewayMCPServer
from wpgate.tools import build_catalog
from wpgate.tools.base import NO_FIELDS_MESSAGE, strip_html

EXPECTED_TOOLS = {
    "list_posts", "get_post", "create_post", "update_post", "delete_post", "get_post_by_slug",
    "list_pages", "get_page", "create_page", "update_page", "delete_page", "get_page_by_slug",
    "list_comments", "get_comment", "moderate_comment", "create_comment", "delete_comment",
    "bulk_moderate_comments",
    "list_media", "get_media", "upload_media_from_url", "update_media", "delete_media",
    "list_images",
    "get_site_info", "get_site_settings", "update_site_settings", "list_categories",
    "create_category", "delete_category", "list_tags", "create_tag", "delete_tag",
    "get_current_user", "list_users",
}


@pytest.fixture
def mcp_server(wp_client) -> GatewayMCPServer:
    return GatewayMCPServer(client_provider=lambda: wp_client)


async def _call(server: GatewayMCPServer, name: str, **arguments) -> str:
    content = await server.handle_tool_call(name, arguments)
    assert len(content) == 1
    return content[0].text


class TestCatalog:
    def test_every_tool_registered_once(self) -> None:
        catalog = build_catalog()
        assert set(catalog.names()) == EXPECTED_TOOLS
        assert len(catalog) == len(EXPECTED_TOOLS)

    def test_tool_list_exports_schemas(self, mcp_server) -> None:
        tools = {tool.name: tool for tool in mcp_server.build_tool_list()}
        schema = tools["bulk_moderate_comments"].inputSchema
        assert schema["type"] == "object"
        assert set(schema["required"]) == {"comment_ids", "status"}
        assert schema["properties"]["comment_ids"]["maxItems"] == 50
        assert tools["list_users"].inputSchema["properties"] == {}


class TestArgumentValidation:
    @pytest.mark.asyncio
    async def test_unknown_tool(self, mcp_server) -> None:
        with pytest.raises(ValueError, match="Unknown tool"):
            await mcp_server.handle_tool_call("drop_tables", {})

    @pytest.mark.asyncio
    async def test_missing_required_argument(self, mcp_server) -> None:
        with pytest.raises(ValidationFailure, match="post_id"):
            await mcp_server.handle_tool_call("get_post", {})

    @pytest.mark.asyncio
    async def test_unexpected_argument(self, mcp_server) -> None:
        with pytest.raises(ValidationFailure):
            await mcp_server.handle_tool_call("get_post", {"post_id": 1, "bogus": True})

    @pytest.mark.asyncio
    async def test_update_without_fields(self, mcp_server) -> None:
        with pytest.raises(ValidationFailure, match=NO_FIELDS_MESSAGE):
            await mcp_server.handle_tool_call("update_post", {"post_id": 3})

    @pytest.mark.asyncio
    async def test_missing_configuration_surfaces_as_error(self) -> None:
        def no_client():
            raise ConfigurationError("WORDPRESS_SITE_URL environment variable is required")

        server = GatewayMCPServer(client_provider=no_client)
        with pytest.raises(ConfigurationError, match="WORDPRESS_SITE_URL"):
            await server.handle_tool_call("list_users", {})


class TestPostTools:
    @pytest.mark.asyncio
    async def test_list_posts_summary(self, fake_wp, mcp_server) -> None:
        fake_wp.json(
            "GET",
            "/wp-json/wp/v2/posts",
            [
                {
                    "id": 1,
                    "title": {"rendered": "Hello"},
                    "excerpt": {"rendered": "<p>" + "x" * 300 + "</p>"},
                    "status": "publish",
                }
            ],
            headers={"X-WP-Total": "12"},
        )

        text = await _call(mcp_server, "list_posts", status="any", categories=[2, 3])

        assert text.startswith("Found 12 posts (page shows 1):")
        params = fake_wp.last.url.params
        assert "status" not in params
        assert params["categories"] == "2,3"
        summary = json.loads(text.split("\n\n", 1)[1])
        assert summary[0]["title"] == "Hello"
        assert summary[0]["excerpt"] == "x" * 200

    @pytest.mark.asyncio
    async def test_create_post_defaults_to_draft(self, fake_wp, mcp_server) -> None:
        fake_wp.json(
            "POST",
            "/wp-json/wp/v2/posts",
            {"id": 8, "title": {"rendered": "New"}, "status": "draft", "link": "https://x/?p=8"},
        )

        text = await _call(mcp_server, "create_post", title="New", content="<p>Body</p>")

        assert fake_wp.last_json()["status"] == "draft"
        assert "Post created successfully!" in text
        assert "ID: 8" in text

    @pytest.mark.asyncio
    async def test_create_post_keeps_whitespace(self, fake_wp, mcp_server) -> None:
        """Content and excerpt reach WordPress exactly as given."""
        fake_wp.json(
            "POST",
            "/wp-json/wp/v2/posts",
            {"id": 9, "title": {"rendered": "t"}, "status": "draft", "link": "https://x/?p=9"},
        )
        content = "\n<pre>  code</pre>\n"

        await _call(mcp_server, "create_post", title=" t ", content=content, excerpt="  lead")

        body = fake_wp.last_json()
        assert body["content"] == content
        assert body["title"] == " t "
        assert body["excerpt"] == "  lead"

    @pytest.mark.asyncio
    async def test_delete_post_force(self, fake_wp, mcp_server) -> None:
        fake_wp.json(
            "DELETE",
            "/wp-json/wp/v2/posts/8",
            {"deleted": True, "previous": {"id": 8, "title": {"rendered": "Old"}}},
        )

        text = await _call(mcp_server, "delete_post", post_id=8, force=True)

        assert fake_wp.last.url.params["force"] == "true"
        assert text == 'Post "Old" (ID: 8) has been permanently deleted.'

    @pytest.mark.asyncio
    async def test_slug_not_found(self, fake_wp, mcp_server) -> None:
        fake_wp.json("GET", "/wp-json/wp/v2/posts", [])
        text = await _call(mcp_server, "get_post_by_slug", slug="nope")
        assert text == 'No post found with slug "nope"'

    @pytest.mark.asyncio
    async def test_upstream_error_propagates(self, fake_wp, mcp_server) -> None:
        fake_wp.json(
            "GET",
            "/wp-json/wp/v2/posts/5",
            {"code": "rest_forbidden", "message": "Sorry, you are not allowed to do that."},
            status_code=403,
        )
        with pytest.raises(UpstreamApiError, match=r"\(403\): Sorry"):
            await mcp_server.handle_tool_call("get_post", {"post_id": 5})


class TestPageAndCommentTools:
    @pytest.mark.asyncio
    async def test_list_pages_defaults(self, fake_wp, mcp_server) -> None:
        fake_wp.json("GET", "/wp-json/wp/v2/pages", [], headers={"X-WP-Total": "0"})

        await _call(mcp_server, "list_pages", parent=0)

        params = fake_wp.last.url.params
        assert params["orderby"] == "menu_order"
        assert params["order"] == "asc"
        assert params["parent"] == "0"

    @pytest.mark.asyncio
    async def test_moderate_comment(self, fake_wp, mcp_server) -> None:
        fake_wp.json(
            "POST",
            "/wp-json/wp/v2/comments/4",
            {"id": 4, "post": 1, "author_name": "Sam", "status": "spam"},
        )

        text = await _call(mcp_server, "moderate_comment", comment_id=4, status="spam")

        assert fake_wp.last_json() == {"status": "spam"}
        assert text.startswith("Comment has been marked as spam.")

    @pytest.mark.asyncio
    async def test_list_comments_drops_all_status(self, fake_wp, mcp_server) -> None:
        fake_wp.json("GET", "/wp-json/wp/v2/comments", [])
        await _call(mcp_server, "list_comments", status="all")
        assert "status" not in fake_wp.last.url.params


class TestMediaTools:
    @pytest.mark.asyncio
    async def test_upload_from_url(self, fake_wp, mcp_server) -> None:
        fake_wp.add(
            "GET",
            "/files/sunset.jpg",
            lambda request: httpx.Response(
                200, content=b"\xff\xd8jpeg", headers={"content-type": "image/jpeg"}
            ),
        )
        fake_wp.json(
            "POST",
            "/wp-json/wp/v2/media",
            {
                "id": 30,
                "title": {"rendered": "Sunset"},
                "source_url": "https://blog.example.com/uploads/sunset.jpg",
                "mime_type": "image/jpeg",
                "media_details": {"width": 800, "height": 600},
            },
            status_code=201,
        )

        text = await _call(
            mcp_server,
            "upload_media_from_url",
            url="https://cdn.example.org/files/sunset.jpg",
            title="Sunset",
            alt_text="Orange sky",
        )

        upload_request = fake_wp.last
        assert b'filename="sunset.jpg"' in upload_request.content
        assert b"Orange sky" in upload_request.content
        assert "Dimensions: 800x600" in text

    @pytest.mark.asyncio
    async def test_delete_media_always_forces(self, fake_wp, mcp_server) -> None:
        fake_wp.json(
            "DELETE",
            "/wp-json/wp/v2/media/30",
            {"deleted": True, "previous": {"id": 30, "title": {"rendered": "Sunset"}}},
        )

        text = await _call(mcp_server, "delete_media", media_id=30)

        assert fake_wp.last.url.params["force"] == "true"
        assert text.startswith('Media item "Sunset" (ID: 30) has been permanently deleted.')

    @pytest.mark.asyncio
    async def test_list_images(self, fake_wp, mcp_server) -> None:
        fake_wp.json(
            "GET",
            "/wp-json/wp/v2/media",
            [
                {
                    "id": 1,
                    "source_url": "https://x/full.png",
                    "media_details": {
                        "width": 10,
                        "sizes": {"thumbnail": {"source_url": "https://x/thumb.png"}},
                    },
                },
                {"id": 2, "source_url": "https://x/other.png"},
            ],
            headers={"X-WP-Total": "2"},
        )

        text = await _call(mcp_server, "list_images")

        assert fake_wp.last.url.params["media_type"] == "image"
        images = json.loads(text.split("\n\n", 1)[1])
        assert images[0]["thumbnail"] == "https://x/thumb.png"
        assert images[0]["dimensions"] == "10x?"
        assert images[1]["thumbnail"] == "https://x/other.png"


class TestSiteTools:
    @pytest.mark.asyncio
    async def test_update_settings_requires_fields(self, mcp_server) -> None:
        with pytest.raises(ValidationFailure):
            await mcp_server.handle_tool_call("update_site_settings", {})

    @pytest.mark.asyncio
    async def test_start_of_week_range(self, mcp_server) -> None:
        with pytest.raises(ValidationFailure, match="start_of_week"):
            await mcp_server.handle_tool_call("update_site_settings", {"start_of_week": 7})

    @pytest.mark.asyncio
    async def test_list_categories(self, fake_wp, mcp_server) -> None:
        fake_wp.json(
            "GET",
            "/wp-json/wp/v2/categories",
            [{"id": 1, "name": "News", "slug": "news", "count": 4}],
            headers={"X-WP-Total": "1"},
        )

        text = await _call(mcp_server, "list_categories")

        params = fake_wp.last.url.params
        assert params["per_page"] == "100"
        assert params["hide_empty"] == "false"
        assert text.startswith("Found 1 categories:")

    @pytest.mark.asyncio
    async def test_delete_tag(self, fake_wp, mcp_server) -> None:
        fake_wp.json(
            "DELETE",
            "/wp-json/wp/v2/tags/6",
            {"deleted": True, "previous": {"id": 6, "name": "old"}},
        )
        text = await _call(mcp_server, "delete_tag", tag_id=6)
        assert text == 'Tag "old" (ID: 6) has been deleted.'


class TestFormatting:
    def test_strip_html(self) -> None:
        assert strip_html("<p>Hi <b>there</b></p>") == "Hi there"
        assert strip_html("<p>abcdef</p>", 3) == "abc"
        assert strip_html(None) == ""
