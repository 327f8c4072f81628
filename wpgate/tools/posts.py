"""Post tools: list, read, create, update, delete, lookup by slug."""

from typing import Any, Literal

from pydantic import Field

from wpgate.tools.base import (
    ToolCatalog,
    ToolInput,
    found_summary,
    rendered,
    strip_html,
    to_json,
    update_fields,
)
from wpgate.wordpress.client import WordPressClient
from wpgate.wordpress.params import ListPostsParams, OpenClosed, PostInput

catalog = ToolCatalog()

WritableStatus = Literal["publish", "draft", "pending", "private", "future"]


class ListPostsArgs(ToolInput):
    status: Literal["publish", "draft", "pending", "private", "future", "any"] | None = Field(
        default=None, description='Filter by post status. Use "any" to include all statuses.'
    )
    search: str | None = Field(
        default=None, description="Search term to filter posts by title or content"
    )
    per_page: int = Field(
        default=20, ge=1, le=100, description="Number of posts to return (1-100, default 20)"
    )
    page: int | None = Field(default=None, ge=1, description="Page number for pagination")
    categories: list[int] | None = Field(default=None, description="Filter by category IDs")
    tags: list[int] | None = Field(default=None, description="Filter by tag IDs")
    order: Literal["asc", "desc"] = Field(default="desc", description="Sort order")
    orderby: Literal["date", "modified", "title", "id"] = Field(
        default="date", description="Field to sort by"
    )


class PostIdArgs(ToolInput):
    post_id: int = Field(description="The ID of the post to retrieve")


class CreatePostArgs(ToolInput):
    title: str = Field(description="The title of the post")
    content: str = Field(description="The HTML content of the post")
    status: WritableStatus = Field(
        default="draft",
        description="Post status: publish, draft, pending, private, or future. Defaults to draft.",
    )
    excerpt: str | None = Field(default=None, description="Optional custom excerpt for the post")
    categories: list[int] | None = Field(default=None, description="Array of category IDs to assign")
    tags: list[int] | None = Field(default=None, description="Array of tag IDs to assign")
    slug: str | None = Field(default=None, description="Custom URL slug for the post")
    featured_media: int | None = Field(
        default=None, description="Media ID to use as featured image"
    )
    sticky: bool | None = Field(default=None, description="Whether to make this a sticky post")
    comment_status: OpenClosed | None = Field(
        default=None, description="Whether to allow comments on this post"
    )


class UpdatePostArgs(ToolInput):
    post_id: int = Field(description="The ID of the post to update")
    title: str | None = Field(default=None, description="New title for the post")
    content: str | None = Field(default=None, description="New HTML content for the post")
    status: WritableStatus | None = Field(
        default=None, description="New status: publish, draft, pending, private, or future"
    )
    excerpt: str | None = Field(default=None, description="New excerpt for the post")
    categories: list[int] | None = Field(
        default=None, description="New array of category IDs (replaces existing)"
    )
    tags: list[int] | None = Field(
        default=None, description="New array of tag IDs (replaces existing)"
    )
    slug: str | None = Field(default=None, description="New URL slug")
    featured_media: int | None = Field(default=None, description="Media ID for new featured image")
    sticky: bool | None = Field(default=None, description="Whether post should be sticky")
    comment_status: OpenClosed | None = Field(default=None, description="Whether to allow comments")


class DeletePostArgs(ToolInput):
    post_id: int = Field(description="The ID of the post to delete")
    force: bool = Field(
        default=False, description="Set to true to permanently delete instead of trashing"
    )


class PostSlugArgs(ToolInput):
    slug: str = Field(description='The URL slug of the post (e.g., "my-first-post")')


def post_details(post: dict[str, Any], full: bool = True) -> dict[str, Any]:
    details = {
        "id": post.get("id"),
        "title": rendered(post, "title"),
        "status": post.get("status"),
        "date": post.get("date"),
        "modified": post.get("modified"),
        "link": post.get("link"),
        "slug": post.get("slug"),
        "content": rendered(post, "content"),
        "excerpt": rendered(post, "excerpt"),
        "author": post.get("author"),
        "categories": post.get("categories"),
        "tags": post.get("tags"),
        "featured_media": post.get("featured_media"),
    }
    if full:
        details.update(
            comment_status=post.get("comment_status"),
            ping_status=post.get("ping_status"),
            sticky=post.get("sticky"),
            format=post.get("format"),
        )
    return details


@catalog.tool(
    "list_posts",
    "List all posts from your WordPress site. Returns post titles, IDs, status, dates, and "
    "excerpts. Supports filtering by status, category, tag, and search terms.",
    ListPostsArgs,
)
async def list_posts(client: WordPressClient, args: ListPostsArgs) -> str:
    params = ListPostsParams(
        per_page=args.per_page,
        order=args.order,
        orderby=args.orderby,
        status=None if args.status in (None, "any") else args.status,
        search=args.search or None,
        page=args.page,
        categories=args.categories,
        tags=args.tags,
    )
    result = await client.list_posts(params)

    summary = [
        {
            "id": post.get("id"),
            "title": rendered(post, "title"),
            "status": post.get("status"),
            "date": post.get("date"),
            "modified": post.get("modified"),
            "link": post.get("link"),
            "slug": post.get("slug"),
            "excerpt": strip_html(rendered(post, "excerpt"), 200),
            "categories": post.get("categories"),
            "tags": post.get("tags"),
        }
        for post in result.items
    ]
    return found_summary("posts", result.total, len(summary), summary)


@catalog.tool(
    "get_post",
    "Get detailed information about a specific post by its ID. Returns full content, "
    "metadata, categories, tags, and settings.",
    PostIdArgs,
)
async def get_post(client: WordPressClient, args: PostIdArgs) -> str:
    post = await client.get_post(args.post_id)
    return to_json(post_details(post))


@catalog.tool(
    "create_post",
    "Create a new blog post. Can create drafts or publish immediately. Supports categories, "
    "tags, featured images, and various settings.",
    CreatePostArgs,
)
async def create_post(client: WordPressClient, args: CreatePostArgs) -> str:
    post = await client.create_post(PostInput(**args.model_dump(exclude_none=True)))
    return (
        "Post created successfully!\n\n"
        f"ID: {post.get('id')}\n"
        f"Title: {rendered(post, 'title')}\n"
        f"Status: {post.get('status')}\n"
        f"URL: {post.get('link')}"
    )


@catalog.tool(
    "update_post",
    "Update an existing post. Can modify title, content, status, and other properties. "
    "Only provide the fields you want to change.",
    UpdatePostArgs,
)
async def update_post(client: WordPressClient, args: UpdatePostArgs) -> str:
    data = update_fields(args, "post_id")
    post = await client.update_post(args.post_id, PostInput(**data))
    return (
        "Post updated successfully!\n\n"
        f"ID: {post.get('id')}\n"
        f"Title: {rendered(post, 'title')}\n"
        f"Status: {post.get('status')}\n"
        f"Modified: {post.get('modified')}\n"
        f"URL: {post.get('link')}"
    )


@catalog.tool(
    "delete_post",
    "Move a post to trash or permanently delete it. By default, posts are moved to trash.",
    DeletePostArgs,
)
async def delete_post(client: WordPressClient, args: DeletePostArgs) -> str:
    post = await client.delete_post(args.post_id, args.force)
    # Permanent deletes answer {"deleted": true, "previous": {...}}
    post = post.get("previous", post) if isinstance(post, dict) else {}
    action = "permanently deleted" if args.force else "moved to trash"
    return f'Post "{rendered(post, "title")}" (ID: {post.get("id", args.post_id)}) has been {action}.'


@catalog.tool(
    "get_post_by_slug",
    "Get a post by its URL slug instead of ID. Useful when you know the post URL but not the ID.",
    PostSlugArgs,
)
async def get_post_by_slug(client: WordPressClient, args: PostSlugArgs) -> str:
    post = await client.get_post_by_slug(args.slug)
    if post is None:
        return f'No post found with slug "{args.slug}"'
    return to_json(post_details(post, full=False))
