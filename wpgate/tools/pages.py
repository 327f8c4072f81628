"""Page tools. Pages are hierarchical posts ordered by ``menu_order``."""

from typing import Any, Literal

from pydantic import Field

from wpgate.tools.base import ToolCatalog, ToolInput, found_summary, rendered, to_json, update_fields
from wpgate.wordpress.client import WordPressClient
from wpgate.wordpress.params import ListPagesParams, OpenClosed, PageInput

catalog = ToolCatalog()

WritableStatus = Literal["publish", "draft", "pending", "private", "future"]


class ListPagesArgs(ToolInput):
    status: Literal["publish", "draft", "pending", "private", "future", "any"] | None = Field(
        default=None, description='Filter by page status. Use "any" to include all statuses.'
    )
    search: str | None = Field(default=None, description="Search term to filter pages")
    per_page: int = Field(
        default=20, ge=1, le=100, description="Number of pages to return (1-100, default 20)"
    )
    page: int | None = Field(default=None, ge=1, description="Page number for pagination")
    parent: int | None = Field(
        default=None, description="Filter by parent page ID (0 for top-level pages)"
    )
    order: Literal["asc", "desc"] = Field(default="asc", description="Sort order")
    orderby: Literal["date", "modified", "title", "menu_order", "id"] = Field(
        default="menu_order", description="Field to sort by"
    )


class PageIdArgs(ToolInput):
    page_id: int = Field(description="The ID of the page to retrieve")


class CreatePageArgs(ToolInput):
    title: str = Field(description="The title of the page")
    content: str = Field(description="The HTML content of the page")
    status: WritableStatus = Field(default="draft", description="Page status. Defaults to draft.")
    excerpt: str | None = Field(default=None, description="Optional excerpt for the page")
    slug: str | None = Field(default=None, description="Custom URL slug for the page")
    parent: int | None = Field(default=None, description="Parent page ID to create a child page")
    menu_order: int | None = Field(default=None, description="Order in page menus")
    featured_media: int | None = Field(default=None, description="Media ID for featured image")
    comment_status: OpenClosed | None = Field(
        default=None, description="Whether to allow comments on this page"
    )
    template: str | None = Field(default=None, description="Page template file to use")


class UpdatePageArgs(ToolInput):
    page_id: int = Field(description="The ID of the page to update")
    title: str | None = Field(default=None, description="New title for the page")
    content: str | None = Field(default=None, description="New HTML content for the page")
    status: WritableStatus | None = Field(default=None, description="New status")
    excerpt: str | None = Field(default=None, description="New excerpt for the page")
    slug: str | None = Field(default=None, description="New URL slug")
    parent: int | None = Field(default=None, description="New parent page ID")
    menu_order: int | None = Field(default=None, description="New menu order")
    featured_media: int | None = Field(default=None, description="Media ID for new featured image")
    comment_status: OpenClosed | None = Field(default=None, description="Whether to allow comments")
    template: str | None = Field(default=None, description="New page template")


class DeletePageArgs(ToolInput):
    page_id: int = Field(description="The ID of the page to delete")
    force: bool = Field(
        default=False, description="Set to true to permanently delete instead of trashing"
    )


class PageSlugArgs(ToolInput):
    slug: str = Field(description='The URL slug of the page (e.g., "about-us")')


def page_details(page: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": page.get("id"),
        "title": rendered(page, "title"),
        "status": page.get("status"),
        "date": page.get("date"),
        "modified": page.get("modified"),
        "link": page.get("link"),
        "slug": page.get("slug"),
        "content": rendered(page, "content"),
        "excerpt": rendered(page, "excerpt"),
        "author": page.get("author"),
        "parent": page.get("parent"),
        "menu_order": page.get("menu_order"),
        "template": page.get("template") or "default",
        "featured_media": page.get("featured_media"),
        "comment_status": page.get("comment_status"),
    }


@catalog.tool(
    "list_pages",
    "List pages from your WordPress site. Returns titles, IDs, hierarchy, and templates. "
    "Supports filtering by status, parent, and search terms.",
    ListPagesArgs,
)
async def list_pages(client: WordPressClient, args: ListPagesArgs) -> str:
    params = ListPagesParams(
        per_page=args.per_page,
        order=args.order,
        orderby=args.orderby,
        status=None if args.status in (None, "any") else args.status,
        search=args.search or None,
        page=args.page,
        parent=args.parent,
    )
    result = await client.list_pages(params)

    summary = [
        {
            "id": page.get("id"),
            "title": rendered(page, "title"),
            "status": page.get("status"),
            "date": page.get("date"),
            "modified": page.get("modified"),
            "link": page.get("link"),
            "slug": page.get("slug"),
            "parent": page.get("parent"),
            "menu_order": page.get("menu_order"),
            "template": page.get("template") or "default",
        }
        for page in result.items
    ]
    return found_summary("pages", result.total, len(summary), summary)


@catalog.tool(
    "get_page",
    "Get detailed information about a specific page by its ID. Returns full content, "
    "metadata, and settings.",
    PageIdArgs,
)
async def get_page(client: WordPressClient, args: PageIdArgs) -> str:
    return to_json(page_details(await client.get_page(args.page_id)))


@catalog.tool(
    "create_page",
    "Create a new page. Pages can be nested under a parent and assigned a template.",
    CreatePageArgs,
)
async def create_page(client: WordPressClient, args: CreatePageArgs) -> str:
    page = await client.create_page(PageInput(**args.model_dump(exclude_none=True)))
    return (
        "Page created successfully!\n\n"
        f"ID: {page.get('id')}\n"
        f"Title: {rendered(page, 'title')}\n"
        f"Status: {page.get('status')}\n"
        f"URL: {page.get('link')}"
    )


@catalog.tool(
    "update_page",
    "Update an existing page. Only provide the fields you want to change.",
    UpdatePageArgs,
)
async def update_page(client: WordPressClient, args: UpdatePageArgs) -> str:
    page = await client.update_page(args.page_id, PageInput(**update_fields(args, "page_id")))
    return (
        "Page updated successfully!\n\n"
        f"ID: {page.get('id')}\n"
        f"Title: {rendered(page, 'title')}\n"
        f"Status: {page.get('status')}\n"
        f"Modified: {page.get('modified')}\n"
        f"URL: {page.get('link')}"
    )


@catalog.tool(
    "delete_page",
    "Move a page to trash or permanently delete it. By default, pages are moved to trash.",
    DeletePageArgs,
)
async def delete_page(client: WordPressClient, args: DeletePageArgs) -> str:
    page = await client.delete_page(args.page_id, args.force)
    page = page.get("previous", page) if isinstance(page, dict) else {}
    action = "permanently deleted" if args.force else "moved to trash"
    return f'Page "{rendered(page, "title")}" (ID: {page.get("id", args.page_id)}) has been {action}.'


@catalog.tool(
    "get_page_by_slug",
    "Get a page by its URL slug instead of ID.",
    PageSlugArgs,
)
async def get_page_by_slug(client: WordPressClient, args: PageSlugArgs) -> str:
    page = await client.get_page_by_slug(args.slug)
    if page is None:
        return f'No page found with slug "{args.slug}"'
    return to_json(page_details(page))
