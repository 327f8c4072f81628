"""Comment tools, including moderation of many comments in one call.

WordPress.org comment statuses are ``approved``, ``hold`` (pending),
``spam`` and ``trash``.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Literal

from pydantic import Field

from wpgate.framework.errors import GatewayError
from wpgate.tools.base import ToolCatalog, ToolInput, found_summary, rendered, strip_html, to_json
from wpgate.wordpress.client import WordPressClient
from wpgate.wordpress.params import CommentInput, CommentStatus, CommentUpdate, ListCommentsParams

logger = logging.getLogger(__name__)

catalog = ToolCatalog()

MAX_BULK_COMMENTS = 50

STATUS_MESSAGES = {
    "approved": "Comment has been approved and is now visible.",
    "hold": "Comment has been set to pending moderation.",
    "spam": "Comment has been marked as spam.",
    "trash": "Comment has been moved to trash.",
}


class ListCommentsArgs(ToolInput):
    status: Literal["approved", "hold", "spam", "trash", "all"] | None = Field(
        default=None,
        description='Filter by comment status. "hold" shows comments awaiting moderation.',
    )
    post: int | None = Field(default=None, description="Filter comments for a specific post ID")
    per_page: int = Field(
        default=20, ge=1, le=100, description="Number of comments to return (1-100, default 20)"
    )
    page: int | None = Field(default=None, ge=1, description="Page number for pagination")
    order: Literal["asc", "desc"] = Field(default="desc", description="Sort order by date")
    search: str | None = Field(default=None, description="Search term to filter comments")


class CommentIdArgs(ToolInput):
    comment_id: int = Field(description="The ID of the comment to retrieve")


class ModerateCommentArgs(ToolInput):
    comment_id: int = Field(description="The ID of the comment to moderate")
    status: CommentStatus = Field(
        description="New status: approved, hold (pending), spam, or trash"
    )


class CreateCommentArgs(ToolInput):
    post: int = Field(description="The ID of the post to comment on")
    content: str = Field(description="The content of the comment (supports HTML)")
    parent: int | None = Field(default=None, description="Parent comment ID if this is a reply")


class DeleteCommentArgs(ToolInput):
    comment_id: int = Field(description="The ID of the comment to delete")
    force: bool = Field(
        default=False, description="Set to true to permanently delete instead of trashing"
    )


class BulkModerateArgs(ToolInput):
    comment_ids: list[int] = Field(
        min_length=1,
        max_length=MAX_BULK_COMMENTS,
        description=f"Array of comment IDs to moderate (max {MAX_BULK_COMMENTS})",
    )
    status: CommentStatus = Field(description="New status to apply to all comments")


@dataclass(frozen=True)
class BulkItemResult:
    """Outcome of one item in a bulk operation."""

    id: int
    success: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.error is None:
            del data["error"]
        return data


async def moderate_comments(
    client: WordPressClient, comment_ids: list[int], status: str
) -> list[BulkItemResult]:
    """Apply ``status`` to each comment in order.

    Each update is independent: a failure is recorded for that item and the
    remaining items are still processed. Results keep input order.
    """
    results: list[BulkItemResult] = []
    for comment_id in comment_ids:
        try:
            await client.update_comment(comment_id, CommentUpdate(status=status))
        except GatewayError as e:
            logger.info("Moderation of comment %s failed: %s", comment_id, e)
            results.append(BulkItemResult(id=comment_id, success=False, error=str(e)))
        else:
            results.append(BulkItemResult(id=comment_id, success=True))
    return results


@catalog.tool(
    "list_comments",
    "List comments from your WordPress site. Can filter by status, post, and date. "
    "Useful for moderation and review.",
    ListCommentsArgs,
)
async def list_comments(client: WordPressClient, args: ListCommentsArgs) -> str:
    params = ListCommentsParams(
        per_page=args.per_page,
        order=args.order,
        status=None if args.status in (None, "all") else args.status,
        post=args.post,
        page=args.page,
        search=args.search or None,
    )
    result = await client.list_comments(params)

    summary = [
        {
            "id": comment.get("id"),
            "post": comment.get("post"),
            "author_name": comment.get("author_name"),
            "author_url": comment.get("author_url") or None,
            "date": comment.get("date"),
            "status": comment.get("status"),
            "content": strip_html(rendered(comment, "content"), 200),
            "parent": comment.get("parent") or None,
        }
        for comment in result.items
    ]
    return found_summary("comments", result.total, len(summary), summary)


@catalog.tool(
    "get_comment",
    "Get detailed information about a specific comment by its ID.",
    CommentIdArgs,
)
async def get_comment(client: WordPressClient, args: CommentIdArgs) -> str:
    comment = await client.get_comment(args.comment_id)
    return to_json(
        {
            "id": comment.get("id"),
            "post": comment.get("post"),
            "author_name": comment.get("author_name"),
            "author_email": comment.get("author_email") or None,
            "author_url": comment.get("author_url") or None,
            "date": comment.get("date"),
            "status": comment.get("status"),
            "content": rendered(comment, "content"),
            "link": comment.get("link"),
            "parent": comment.get("parent") or None,
            "type": comment.get("type"),
        }
    )


@catalog.tool(
    "moderate_comment",
    "Change the status of a comment. Use this to approve pending comments, mark as spam, "
    "or trash inappropriate comments.",
    ModerateCommentArgs,
)
async def moderate_comment(client: WordPressClient, args: ModerateCommentArgs) -> str:
    comment = await client.update_comment(args.comment_id, CommentUpdate(status=args.status))
    return (
        f"{STATUS_MESSAGES[args.status]}\n\n"
        f"Comment ID: {comment.get('id')}\n"
        f"Post ID: {comment.get('post')}\n"
        f"Author: {comment.get('author_name')}\n"
        f"New Status: {comment.get('status')}"
    )


@catalog.tool(
    "create_comment",
    "Create a new comment on a post. Can be used to reply to existing comments by "
    "specifying a parent.",
    CreateCommentArgs,
)
async def create_comment(client: WordPressClient, args: CreateCommentArgs) -> str:
    comment = await client.create_comment(CommentInput(**args.model_dump(exclude_none=True)))
    return (
        "Comment posted successfully!\n\n"
        f"Comment ID: {comment.get('id')}\n"
        f"Post ID: {comment.get('post')}\n"
        f"Status: {comment.get('status')}\n"
        f"Link: {comment.get('link')}"
    )


@catalog.tool(
    "delete_comment",
    "Delete a comment. Use force=true to permanently delete, otherwise moves to trash.",
    DeleteCommentArgs,
)
async def delete_comment(client: WordPressClient, args: DeleteCommentArgs) -> str:
    comment = await client.delete_comment(args.comment_id, args.force)
    comment = comment.get("previous", comment) if isinstance(comment, dict) else {}
    action = "permanently deleted" if args.force else "moved to trash"
    return f"Comment (ID: {comment.get('id', args.comment_id)}) has been {action}."


@catalog.tool(
    "bulk_moderate_comments",
    "Moderate multiple comments at once. Useful for approving several pending comments "
    "or clearing spam.",
    BulkModerateArgs,
)
async def bulk_moderate_comments(client: WordPressClient, args: BulkModerateArgs) -> str:
    results = await moderate_comments(client, args.comment_ids, args.status)
    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful
    return (
        "Bulk moderation complete.\n\n"
        f"Successful: {successful}\n"
        f"Failed: {failed}\n\n"
        f"Details:\n{to_json([r.to_dict() for r in results])}"
    )
