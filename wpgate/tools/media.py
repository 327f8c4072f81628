"""Media library tools."""

from typing import Any, Literal

from pydantic import Field, HttpUrl

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
from wpgate.wordpress.params import ListMediaParams, MediaFields

catalog = ToolCatalog()


class ListMediaArgs(ToolInput):
    per_page: int = Field(
        default=20, ge=1, le=100, description="Number of media items to return (1-100, default 20)"
    )
    page: int | None = Field(default=None, ge=1, description="Page number for pagination")
    search: str | None = Field(default=None, description="Search term to filter media by title")
    media_type: Literal["image", "video", "audio", "application"] | None = Field(
        default=None, description="Filter by media type"
    )
    mime_type: str | None = Field(
        default=None, description='Filter by MIME type (e.g., "image/jpeg", "application/pdf")'
    )


class MediaIdArgs(ToolInput):
    media_id: int = Field(description="The ID of the media item")


class UploadFromUrlArgs(ToolInput):
    url: HttpUrl = Field(description="The URL of the file to upload")
    title: str | None = Field(default=None, description="Title for the media item")
    caption: str | None = Field(default=None, description="Caption for the media item")
    description: str | None = Field(default=None, description="Description for the media item")
    alt_text: str | None = Field(
        default=None, description="Alt text for images (important for accessibility)"
    )


class UpdateMediaArgs(ToolInput):
    media_id: int = Field(description="The ID of the media item to update")
    title: str | None = Field(default=None, description="New title for the media item")
    caption: str | None = Field(default=None, description="New caption")
    description: str | None = Field(default=None, description="New description")
    alt_text: str | None = Field(default=None, description="New alt text for images")


class ListImagesArgs(ToolInput):
    per_page: int = Field(default=20, ge=1, le=100, description="Number of images to return")
    page: int | None = Field(default=None, ge=1, description="Page number for pagination")
    search: str | None = Field(default=None, description="Search term to filter images by title")


def _details(item: dict[str, Any]) -> dict[str, Any]:
    return item.get("media_details") or {}


def _dimensions(item: dict[str, Any], missing: str = "N/A") -> str:
    details = _details(item)
    return f"{details.get('width') or missing}x{details.get('height') or missing}"


@catalog.tool(
    "list_media",
    "List media files (images, documents, etc.) from your WordPress media library. "
    "Returns file URLs, dimensions, and metadata.",
    ListMediaArgs,
)
async def list_media(client: WordPressClient, args: ListMediaArgs) -> str:
    params = ListMediaParams(
        per_page=args.per_page,
        page=args.page,
        search=args.search or None,
        media_type=args.media_type,
        mime_type=args.mime_type or None,
    )
    result = await client.list_media(params)

    summary = [
        {
            "id": item.get("id"),
            "title": rendered(item, "title"),
            "source_url": item.get("source_url"),
            "mime_type": item.get("mime_type"),
            "media_type": item.get("media_type"),
            "date": item.get("date"),
            "width": _details(item).get("width") or None,
            "height": _details(item).get("height") or None,
            "alt_text": item.get("alt_text") or None,
            "caption": strip_html(rendered(item, "caption")) or None,
        }
        for item in result.items
    ]
    return found_summary("media items", result.total, len(summary), summary)


@catalog.tool(
    "get_media",
    "Get detailed information about a specific media item by its ID. Returns full metadata, "
    "dimensions, and all available sizes.",
    MediaIdArgs,
)
async def get_media(client: WordPressClient, args: MediaIdArgs) -> str:
    item = await client.get_media(args.media_id)
    details = _details(item)
    return to_json(
        {
            "id": item.get("id"),
            "title": rendered(item, "title"),
            "source_url": item.get("source_url"),
            "link": item.get("link"),
            "mime_type": item.get("mime_type"),
            "media_type": item.get("media_type"),
            "date": item.get("date"),
            "modified": item.get("modified"),
            "author": item.get("author"),
            "alt_text": item.get("alt_text") or None,
            "caption": rendered(item, "caption") or None,
            "description": rendered(item, "description") or None,
            "media_details": {
                "width": details.get("width"),
                "height": details.get("height"),
                "file": details.get("file"),
                "sizes": list((details.get("sizes") or {}).keys()),
            },
        }
    )


@catalog.tool(
    "upload_media_from_url",
    "Upload a media file to WordPress from a URL. Downloads the file and uploads it to "
    "your media library.",
    UploadFromUrlArgs,
)
async def upload_media_from_url(client: WordPressClient, args: UploadFromUrlArgs) -> str:
    upload = await client.download(str(args.url))
    fields = MediaFields(**args.model_dump(exclude_none=True, exclude={"url"}))
    media = await client.upload_media(upload, fields)
    return (
        "Media uploaded successfully!\n\n"
        f"ID: {media.get('id')}\n"
        f"Title: {rendered(media, 'title')}\n"
        f"URL: {media.get('source_url')}\n"
        f"MIME Type: {media.get('mime_type')}\n"
        f"Dimensions: {_dimensions(media)}"
    )


@catalog.tool(
    "update_media",
    "Update metadata for a media item. Can change title, caption, description, and alt text.",
    UpdateMediaArgs,
)
async def update_media(client: WordPressClient, args: UpdateMediaArgs) -> str:
    media = await client.update_media(args.media_id, MediaFields(**update_fields(args, "media_id")))
    return (
        "Media updated successfully!\n\n"
        f"ID: {media.get('id')}\n"
        f"Title: {rendered(media, 'title')}\n"
        f"Alt: {media.get('alt_text') or '(none)'}\n"
        f"URL: {media.get('source_url')}"
    )


@catalog.tool(
    "delete_media",
    "Permanently delete a media item from the media library. This action cannot be undone.",
    MediaIdArgs,
)
async def delete_media(client: WordPressClient, args: MediaIdArgs) -> str:
    media = await client.delete_media(args.media_id)
    media = media.get("previous", media) if isinstance(media, dict) else {}
    return (
        f'Media item "{rendered(media, "title")}" (ID: {media.get("id", args.media_id)}) '
        "has been permanently deleted.\n\n"
        "Note: Any posts or pages using this media will show broken images."
    )


@catalog.tool(
    "list_images",
    "List only image files from your media library. Convenience tool for finding images "
    "to use as featured images.",
    ListImagesArgs,
)
async def list_images(client: WordPressClient, args: ListImagesArgs) -> str:
    result = await client.list_media(
        ListMediaParams(
            per_page=args.per_page,
            page=args.page,
            search=args.search or None,
            media_type="image",
        )
    )

    summary = []
    for item in result.items:
        sizes = _details(item).get("sizes") or {}
        thumbnail = (sizes.get("thumbnail") or {}).get("source_url") or item.get("source_url")
        summary.append(
            {
                "id": item.get("id"),
                "title": rendered(item, "title"),
                "source_url": item.get("source_url"),
                "dimensions": _dimensions(item, missing="?"),
                "thumbnail": thumbnail,
                "alt_text": item.get("alt_text") or None,
            }
        )
    return found_summary("images", result.total, len(summary), summary)
