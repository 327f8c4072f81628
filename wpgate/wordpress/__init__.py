"""WordPress REST API layer: query encoding, auth, request execution, typed client."""

from .auth import Credential, basic_auth_header
from .client import WordPressClient, create_wordpress_client
from .executor import ListResult, MediaUpload, RequestExecutor, RequestSpec, parse_total_header
from .query import encode_query

__all__ = [
    "Credential",
    "ListResult",
    "MediaUpload",
    "RequestExecutor",
    "RequestSpec",
    "WordPressClient",
    "basic_auth_header",
    "create_wordpress_client",
    "encode_query",
    "parse_total_header",
]
