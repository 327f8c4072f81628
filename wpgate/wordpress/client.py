"""
Typed WordPress REST client.

Composes the query encoder, the request executor and the paginator into
list/get/create/update/delete operations per resource kind. Tool handlers
call these methods and nothing else.

Example:
    client = create_wordpress_client(config.wordpress)
    page = await client.list_posts(ListPostsParams(search="release"))
    for post in page.items:
        ...
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from wpgate.wordpress.auth import Credential
from wpgate.wordpress.executor import ListResult, MediaUpload, RequestExecutor, RequestSpec
from wpgate.wordpress.params import (
    CommentInput,
    CommentUpdate,
    ListCommentsParams,
    ListMediaParams,
    ListPagesParams,
    ListPostsParams,
    ListTermsParams,
    MediaFields,
    PageInput,
    PostInput,
    SettingsUpdate,
    TermInput,
)
from wpgate.wordpress.query import encode_query

if TYPE_CHECKING:
    from wpgate.config import WordPressConfig

logger = logging.getLogger(__name__)

API_PREFIX = "/wp-json/wp/v2"
CONTENT_PER_PAGE = 20
TERMS_PER_PAGE = 100

Model = TypeVar("Model", bound=BaseModel)
JSON = dict[str, Any]


def _coerce(model: type[Model], value: Model | Mapping[str, Any] | None) -> Model:
    if value is None:
        return model()
    if isinstance(value, model):
        return value
    return model.model_validate(dict(value))


def _with_defaults(params: BaseModel, **defaults: Any) -> dict[str, Any]:
    query = dict(defaults)
    query.update(params.model_dump(exclude_none=True, mode="json", by_alias=True))
    return query


def _force_query(force: bool) -> str:
    return "?force=true" if force else ""


class WordPressClient:
    """Resource operations against one WordPress site."""

    def __init__(
        self,
        site_url: str,
        credential: Credential,
        *,
        timeout_seconds: float = 30.0,
        executor: RequestExecutor | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.site_url = site_url.rstrip("/")
        self.api_base = f"{self.site_url}{API_PREFIX}"
        self.executor = executor or RequestExecutor(
            self.api_base,
            credential,
            timeout_seconds=timeout_seconds,
            transport=transport,
        )

    async def _get(self, target: str) -> Any:
        return await self.executor.execute(RequestSpec(target))

    async def _list(self, target: str) -> ListResult[JSON]:
        return await self.executor.execute_with_metadata(RequestSpec(target))

    async def _post(self, target: str, body: Mapping[str, Any]) -> Any:
        return await self.executor.execute(RequestSpec(target, method="POST", json=dict(body)))

    async def _delete(self, target: str) -> Any:
        return await self.executor.execute(RequestSpec(target, method="DELETE"))

    async def _first_by_slug(self, collection: str, slug: str) -> JSON | None:
        result = await self._list(f"/{collection}?slug={quote(slug, safe='')}")
        return result.first()

    # ==================== Posts ====================

    async def list_posts(
        self, params: ListPostsParams | Mapping[str, Any] | None = None
    ) -> ListResult[JSON]:
        query = _with_defaults(_coerce(ListPostsParams, params), per_page=CONTENT_PER_PAGE)
        return await self._list(f"/posts{encode_query(query)}")

    async def get_post(self, post_id: int) -> JSON:
        return await self._get(f"/posts/{post_id}")

    async def get_post_by_slug(self, slug: str) -> JSON | None:
        return await self._first_by_slug("posts", slug)

    async def create_post(self, data: PostInput | Mapping[str, Any]) -> JSON:
        return await self._post("/posts", _coerce(PostInput, data).payload())

    async def update_post(self, post_id: int, data: PostInput | Mapping[str, Any]) -> JSON:
        return await self._post(f"/posts/{post_id}", _coerce(PostInput, data).payload())

    async def delete_post(self, post_id: int, force: bool = False) -> JSON:
        return await self._delete(f"/posts/{post_id}{_force_query(force)}")

    # ==================== Pages ====================

    async def list_pages(
        self, params: ListPagesParams | Mapping[str, Any] | None = None
    ) -> ListResult[JSON]:
        query = _with_defaults(_coerce(ListPagesParams, params), per_page=CONTENT_PER_PAGE)
        return await self._list(f"/pages{encode_query(query)}")

    async def get_page(self, page_id: int) -> JSON:
        return await self._get(f"/pages/{page_id}")

    async def get_page_by_slug(self, slug: str) -> JSON | None:
        return await self._first_by_slug("pages", slug)

    async def create_page(self, data: PageInput | Mapping[str, Any]) -> JSON:
        return await self._post("/pages", _coerce(PageInput, data).payload())

    async def update_page(self, page_id: int, data: PageInput | Mapping[str, Any]) -> JSON:
        return await self._post(f"/pages/{page_id}", _coerce(PageInput, data).payload())

    async def delete_page(self, page_id: int, force: bool = False) -> JSON:
        return await self._delete(f"/pages/{page_id}{_force_query(force)}")

    # ==================== Comments ====================

    async def list_comments(
        self, params: ListCommentsParams | Mapping[str, Any] | None = None
    ) -> ListResult[JSON]:
        query = _with_defaults(_coerce(ListCommentsParams, params), per_page=CONTENT_PER_PAGE)
        return await self._list(f"/comments{encode_query(query)}")

    async def get_comment(self, comment_id: int) -> JSON:
        return await self._get(f"/comments/{comment_id}")

    async def create_comment(self, data: CommentInput | Mapping[str, Any]) -> JSON:
        return await self._post("/comments", _coerce(CommentInput, data).payload())

    async def update_comment(
        self, comment_id: int, data: CommentUpdate | Mapping[str, Any]
    ) -> JSON:
        return await self._post(f"/comments/{comment_id}", _coerce(CommentUpdate, data).payload())

    async def delete_comment(self, comment_id: int, force: bool = False) -> JSON:
        return await self._delete(f"/comments/{comment_id}{_force_query(force)}")

    # ==================== Media ====================

    async def list_media(
        self, params: ListMediaParams | Mapping[str, Any] | None = None
    ) -> ListResult[JSON]:
        query = _with_defaults(_coerce(ListMediaParams, params), per_page=CONTENT_PER_PAGE)
        return await self._list(f"/media{encode_query(query)}")

    async def get_media(self, media_id: int) -> JSON:
        return await self._get(f"/media/{media_id}")

    async def upload_media(
        self,
        upload: MediaUpload,
        fields: MediaFields | Mapping[str, Any] | None = None,
    ) -> JSON:
        """Create a media item from a binary payload (multipart form upload)."""
        form = {
            key: str(value)
            for key, value in _coerce(MediaFields, fields).payload().items()
            if value != ""
        }
        logger.info("Uploading media %s (%s bytes)", upload.filename, upload.size)
        return await self.executor.execute(
            RequestSpec("/media", method="POST", upload=upload, form=form)
        )

    async def update_media(self, media_id: int, data: MediaFields | Mapping[str, Any]) -> JSON:
        return await self._post(f"/media/{media_id}", _coerce(MediaFields, data).payload())

    async def delete_media(self, media_id: int, force: bool = True) -> JSON:
        # Media has no trash; WordPress rejects deletes without force=true
        force_value = "true" if force else "false"
        return await self._delete(f"/media/{media_id}?force={force_value}")

    # ==================== Categories ====================

    async def list_categories(
        self, params: ListTermsParams | Mapping[str, Any] | None = None
    ) -> ListResult[JSON]:
        query = _with_defaults(_coerce(ListTermsParams, params), per_page=TERMS_PER_PAGE)
        return await self._list(f"/categories{encode_query(query)}")

    async def get_category(self, category_id: int) -> JSON:
        return await self._get(f"/categories/{category_id}")

    async def create_category(self, data: TermInput | Mapping[str, Any]) -> JSON:
        return await self._post("/categories", _coerce(TermInput, data).payload())

    async def update_category(self, category_id: int, data: TermInput | Mapping[str, Any]) -> JSON:
        return await self._post(f"/categories/{category_id}", _coerce(TermInput, data).payload())

    async def delete_category(self, category_id: int) -> JSON:
        return await self._delete(f"/categories/{category_id}?force=true")

    # ==================== Tags ====================

    async def list_tags(
        self, params: ListTermsParams | Mapping[str, Any] | None = None
    ) -> ListResult[JSON]:
        query = _with_defaults(_coerce(ListTermsParams, params), per_page=TERMS_PER_PAGE)
        return await self._list(f"/tags{encode_query(query)}")

    async def get_tag(self, tag_id: int) -> JSON:
        return await self._get(f"/tags/{tag_id}")

    async def create_tag(self, data: TermInput | Mapping[str, Any]) -> JSON:
        return await self._post("/tags", _coerce(TermInput, data).payload())

    async def update_tag(self, tag_id: int, data: TermInput | Mapping[str, Any]) -> JSON:
        return await self._post(f"/tags/{tag_id}", _coerce(TermInput, data).payload())

    async def delete_tag(self, tag_id: int) -> JSON:
        return await self._delete(f"/tags/{tag_id}?force=true")

    # ==================== Users ====================

    async def list_users(self) -> ListResult[JSON]:
        return await self._list("/users")

    async def get_user(self, user_id: int) -> JSON:
        return await self._get(f"/users/{user_id}")

    async def get_current_user(self) -> JSON:
        return await self._get("/users/me")

    # ==================== Settings ====================

    async def get_settings(self) -> JSON:
        return await self._get("/settings")

    async def update_settings(self, data: SettingsUpdate | Mapping[str, Any]) -> JSON:
        return await self._post("/settings", _coerce(SettingsUpdate, data).payload())

    # ==================== Site Info ====================

    async def get_site_info(self) -> JSON:
        """Site index (name, description, url, home, gmt_offset, timezone_string)."""
        return await self._get(f"{self.site_url}/wp-json")

    async def download(self, url: str) -> MediaUpload:
        return await self.executor.download(url)

    async def aclose(self) -> None:
        await self.executor.aclose()


def create_wordpress_client(config: "WordPressConfig", **kwargs: Any) -> WordPressClient:
    """Build a client from a ``WordPressConfig``.

    Raises:
        ConfigurationError: If site URL, username or application password is missing
    """
    credential = config.credential()
    return WordPressClient(
        config.site_url,
        credential,
        timeout_seconds=config.timeout_seconds,
        **kwargs,
    )


__all__ = ["API_PREFIX", "WordPressClient", "create_wordpress_client"]
