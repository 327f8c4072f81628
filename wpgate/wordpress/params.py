"""Parameter and payload models for each WordPress resource kind.

List models carry the query filters a tool may send; input models carry the
JSON body of create/update calls. Unset fields are ``None`` and are dropped
before encoding, so WordPress applies its own defaults.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

PostStatus = Literal["publish", "future", "draft", "pending", "private", "trash"]
CommentStatus = Literal["approved", "hold", "spam", "trash"]
OpenClosed = Literal["open", "closed"]
Order = Literal["asc", "desc"]
MediaType = Literal["image", "video", "text", "application", "audio"]

IdFilter = int | list[int]


class _Params(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def payload(self) -> dict[str, Any]:
        """Fields that were actually set, JSON-ready."""
        return self.model_dump(exclude_none=True, mode="json", by_alias=True)


# =============================================================================
# List parameters
# =============================================================================


class ListParams(_Params):
    """Filters shared by every collection endpoint."""

    context: Literal["view", "embed", "edit"] | None = None
    page: int | None = Field(default=None, ge=1)
    per_page: int | None = Field(default=None, ge=1, le=100)
    search: str | None = None
    exclude: list[int] | None = None
    include: list[int] | None = None
    offset: int | None = Field(default=None, ge=0)
    order: Order | None = None


class ListPostsParams(ListParams):
    after: str | None = None
    before: str | None = None
    author: IdFilter | None = None
    author_exclude: IdFilter | None = None
    orderby: (
        Literal[
            "author", "date", "id", "include", "modified", "parent",
            "relevance", "slug", "include_slugs", "title",
        ]
        | None
    ) = None
    slug: str | list[str] | None = None
    status: PostStatus | list[PostStatus] | None = None
    categories: IdFilter | None = None
    categories_exclude: IdFilter | None = None
    tags: IdFilter | None = None
    tags_exclude: IdFilter | None = None
    sticky: bool | None = None
    embed: bool | None = Field(default=None, alias="_embed")


class ListPagesParams(ListParams):
    after: str | None = None
    before: str | None = None
    author: IdFilter | None = None
    author_exclude: IdFilter | None = None
    orderby: (
        Literal[
            "author", "date", "id", "include", "modified", "parent",
            "relevance", "slug", "include_slugs", "title", "menu_order",
        ]
        | None
    ) = None
    slug: str | list[str] | None = None
    status: PostStatus | list[PostStatus] | None = None
    parent: IdFilter | None = None
    parent_exclude: IdFilter | None = None
    menu_order: int | None = None
    embed: bool | None = Field(default=None, alias="_embed")


class ListCommentsParams(ListParams):
    after: str | None = None
    before: str | None = None
    author: IdFilter | None = None
    author_exclude: IdFilter | None = None
    author_email: str | None = None
    orderby: Literal["date", "date_gmt", "id", "include", "post", "parent", "type"] | None = None
    parent: IdFilter | None = None
    parent_exclude: IdFilter | None = None
    post: IdFilter | None = None
    status: str | None = None
    type: str | None = None


class ListMediaParams(ListParams):
    after: str | None = None
    before: str | None = None
    author: IdFilter | None = None
    author_exclude: IdFilter | None = None
    orderby: (
        Literal[
            "author", "date", "id", "include", "modified", "parent",
            "relevance", "slug", "include_slugs", "title",
        ]
        | None
    ) = None
    parent: IdFilter | None = None
    parent_exclude: IdFilter | None = None
    slug: str | list[str] | None = None
    status: str | None = None
    media_type: MediaType | None = None
    mime_type: str | None = None


class ListTermsParams(ListParams):
    """Categories and tags."""

    orderby: (
        Literal[
            "id", "include", "name", "slug", "include_slugs",
            "term_group", "description", "count",
        ]
        | None
    ) = None
    hide_empty: bool | None = None
    parent: int | None = None
    post: int | None = None
    slug: str | list[str] | None = None


# =============================================================================
# Write payloads
# =============================================================================


class PostInput(_Params):
    """Body for creating or updating a post. Every field optional for updates."""

    title: str | None = None
    content: str | None = None
    excerpt: str | None = None
    status: PostStatus | None = None
    slug: str | None = None
    categories: list[int] | None = None
    tags: list[int] | None = None
    format: str | None = None
    featured_media: int | None = None
    sticky: bool | None = None
    password: str | None = None
    comment_status: OpenClosed | None = None
    ping_status: OpenClosed | None = None
    meta: dict[str, Any] | None = None


class PageInput(_Params):
    title: str | None = None
    content: str | None = None
    excerpt: str | None = None
    status: PostStatus | None = None
    slug: str | None = None
    featured_media: int | None = None
    password: str | None = None
    comment_status: OpenClosed | None = None
    ping_status: OpenClosed | None = None
    meta: dict[str, Any] | None = None
    parent: int | None = None
    menu_order: int | None = None
    template: str | None = None


class CommentInput(_Params):
    post: int
    content: str
    parent: int | None = None
    author_name: str | None = None
    author_email: str | None = None
    author_url: str | None = None


class CommentUpdate(_Params):
    content: str | None = None
    status: CommentStatus | None = None


class MediaFields(_Params):
    """Text metadata for a media item (multipart fields on upload, JSON on update)."""

    title: str | None = None
    caption: str | None = None
    description: str | None = None
    alt_text: str | None = None
    post: int | None = None


class TermInput(_Params):
    """Body for creating or updating a category or tag."""

    name: str | None = None
    description: str | None = None
    slug: str | None = None
    parent: int | None = None


class SettingsUpdate(_Params):
    title: str | None = None
    description: str | None = None
    timezone: str | None = None
    date_format: str | None = None
    time_format: str | None = None
    start_of_week: int | None = Field(default=None, ge=0, le=6)
    posts_per_page: int | None = Field(default=None, ge=1, le=100)
    default_category: int | None = None
    default_post_format: str | None = None
    default_ping_status: OpenClosed | None = None
    default_comment_status: OpenClosed | None = None
