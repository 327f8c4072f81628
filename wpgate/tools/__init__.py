"""MCP tool catalog for WordPress resources."""

from wpgate.tools import comments, media, pages, posts, settings
from wpgate.tools.base import NoArguments, ToolCatalog, ToolInput, ToolSpec

TOOL_MODULES = (posts, pages, comments, media, settings)


def build_catalog() -> ToolCatalog:
    """Combine every tool module's catalog, in listing order."""
    catalog = ToolCatalog()
    for module in TOOL_MODULES:
        catalog.extend(module.catalog)
    return catalog


__all__ = ["NoArguments", "ToolCatalog", "ToolInput", "ToolSpec", "build_catalog"]
