"""Site-level tools: site info, settings, taxonomy terms and users."""

from pydantic import Field

from wpgate.tools.base import ToolCatalog, ToolInput, to_json, update_fields
from wpgate.wordpress.client import WordPressClient
from wpgate.wordpress.params import ListTermsParams, OpenClosed, SettingsUpdate, TermInput

catalog = ToolCatalog()


class UpdateSettingsArgs(ToolInput):
    title: str | None = Field(default=None, description="Site title/name")
    description: str | None = Field(default=None, description="Site tagline/description")
    timezone: str | None = Field(
        default=None, description='Timezone (e.g., "America/New_York", "Europe/London")'
    )
    date_format: str | None = Field(
        default=None, description='Date format (e.g., "F j, Y" for "January 1, 2024")'
    )
    time_format: str | None = Field(
        default=None, description='Time format (e.g., "g:i a" for "12:00 pm")'
    )
    start_of_week: int | None = Field(
        default=None, ge=0, le=6, description="First day of week: 0=Sunday, 1=Monday, etc."
    )
    posts_per_page: int | None = Field(
        default=None, ge=1, le=100, description="Number of posts to show per page"
    )
    default_comment_status: OpenClosed | None = Field(
        default=None, description="Default comment status for new posts"
    )
    default_ping_status: OpenClosed | None = Field(
        default=None, description="Default ping/trackback status for new posts"
    )


class ListCategoriesArgs(ToolInput):
    per_page: int = Field(default=100, ge=1, le=100, description="Number of categories to return")
    hide_empty: bool = Field(default=False, description="Whether to hide categories with no posts")


class CreateCategoryArgs(ToolInput):
    name: str = Field(description="Name of the category")
    description: str | None = Field(default=None, description="Description of the category")
    parent: int | None = Field(
        default=None, description="Parent category ID to create a child category"
    )


class CategoryIdArgs(ToolInput):
    category_id: int = Field(description="The ID of the category to delete")


class ListTagsArgs(ToolInput):
    per_page: int = Field(default=100, ge=1, le=100, description="Number of tags to return")
    hide_empty: bool = Field(default=False, description="Whether to hide tags with no posts")
    search: str | None = Field(default=None, description="Search term to filter tags")


class CreateTagArgs(ToolInput):
    name: str = Field(description="Name of the tag")
    description: str | None = Field(default=None, description="Description of the tag")


class TagIdArgs(ToolInput):
    tag_id: int = Field(description="The ID of the tag to delete")


def _deleted(term: dict) -> dict:
    return term.get("previous", term) if isinstance(term, dict) else {}


@catalog.tool(
    "get_site_info",
    "Get basic information about your WordPress site including name, description, and URL.",
)
async def get_site_info(client: WordPressClient, args: ToolInput) -> str:
    site = await client.get_site_info()
    keys = ("name", "description", "url", "home", "gmt_offset", "timezone_string")
    return to_json({key: site.get(key) for key in keys if key in site})


@catalog.tool(
    "get_site_settings",
    "Get detailed site settings including name, tagline, timezone, date/time formats, "
    "and reading settings.",
)
async def get_site_settings(client: WordPressClient, args: ToolInput) -> str:
    return to_json(await client.get_settings())


@catalog.tool(
    "update_site_settings",
    "Update site settings like name, tagline, timezone, and other configuration options. "
    "Only provide fields you want to change.",
    UpdateSettingsArgs,
)
async def update_site_settings(client: WordPressClient, args: UpdateSettingsArgs) -> str:
    settings = await client.update_settings(SettingsUpdate(**update_fields(args)))
    return (
        "Site settings updated successfully!\n\n"
        f"Title: {settings.get('title')}\n"
        f"Description: {settings.get('description')}\n"
        f"Timezone: {settings.get('timezone')}"
    )


@catalog.tool(
    "list_categories",
    "List all categories on your WordPress site. Categories are used to organize posts "
    "into topics.",
    ListCategoriesArgs,
)
async def list_categories(client: WordPressClient, args: ListCategoriesArgs) -> str:
    result = await client.list_categories(
        ListTermsParams(per_page=args.per_page, hide_empty=args.hide_empty)
    )
    summary = [
        {
            "id": cat.get("id"),
            "name": cat.get("name"),
            "slug": cat.get("slug"),
            "description": cat.get("description") or None,
            "parent": cat.get("parent") or None,
            "count": cat.get("count"),
        }
        for cat in result.items
    ]
    return f"Found {result.total} categories:\n\n{to_json(summary)}"


@catalog.tool("create_category", "Create a new category for organizing posts.", CreateCategoryArgs)
async def create_category(client: WordPressClient, args: CreateCategoryArgs) -> str:
    category = await client.create_category(TermInput(**args.model_dump(exclude_none=True)))
    return (
        "Category created successfully!\n\n"
        f"ID: {category.get('id')}\n"
        f"Name: {category.get('name')}\n"
        f"Slug: {category.get('slug')}"
    )


@catalog.tool(
    "delete_category",
    "Delete a category. Posts in this category will be moved to the default category.",
    CategoryIdArgs,
)
async def delete_category(client: WordPressClient, args: CategoryIdArgs) -> str:
    category = _deleted(await client.delete_category(args.category_id))
    return (
        f'Category "{category.get("name")}" (ID: {category.get("id", args.category_id)}) '
        "has been deleted."
    )


@catalog.tool(
    "list_tags",
    "List all tags on your WordPress site. Tags are keywords used to describe posts.",
    ListTagsArgs,
)
async def list_tags(client: WordPressClient, args: ListTagsArgs) -> str:
    result = await client.list_tags(
        ListTermsParams(
            per_page=args.per_page, hide_empty=args.hide_empty, search=args.search or None
        )
    )
    summary = [
        {
            "id": tag.get("id"),
            "name": tag.get("name"),
            "slug": tag.get("slug"),
            "description": tag.get("description") or None,
            "count": tag.get("count"),
        }
        for tag in result.items
    ]
    return f"Found {result.total} tags:\n\n{to_json(summary)}"


@catalog.tool("create_tag", "Create a new tag for labeling posts.", CreateTagArgs)
async def create_tag(client: WordPressClient, args: CreateTagArgs) -> str:
    tag = await client.create_tag(TermInput(**args.model_dump(exclude_none=True)))
    return (
        "Tag created successfully!\n\n"
        f"ID: {tag.get('id')}\n"
        f"Name: {tag.get('name')}\n"
        f"Slug: {tag.get('slug')}"
    )


@catalog.tool(
    "delete_tag", "Delete a tag. The tag will be removed from all posts.", TagIdArgs
)
async def delete_tag(client: WordPressClient, args: TagIdArgs) -> str:
    tag = _deleted(await client.delete_tag(args.tag_id))
    return f'Tag "{tag.get("name")}" (ID: {tag.get("id", args.tag_id)}) has been deleted.'


@catalog.tool(
    "get_current_user",
    "Get information about the currently authenticated WordPress user.",
)
async def get_current_user(client: WordPressClient, args: ToolInput) -> str:
    user = await client.get_current_user()
    return to_json(
        {
            "id": user.get("id"),
            "name": user.get("name"),
            "slug": user.get("slug"),
            "description": user.get("description") or None,
            "url": user.get("url") or None,
            "link": user.get("link"),
        }
    )


@catalog.tool("list_users", "List all users on your WordPress site.")
async def list_users(client: WordPressClient, args: ToolInput) -> str:
    result = await client.list_users()
    summary = [
        {
            "id": user.get("id"),
            "name": user.get("name"),
            "slug": user.get("slug"),
            "url": user.get("url") or None,
        }
        for user in result.items
    ]
    return f"Found {result.total} users:\n\n{to_json(summary)}"
