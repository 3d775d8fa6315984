"""
Notion Sitemap - Generate an indented Markdown sitemap of a Notion page tree
"""

__version__ = "0.1.0"

from .client import NotionClient
from .config import SitemapConfig
from .errors import ApiError, ConfigurationError, Result, UnknownError
from .sitemap import NodeKind, NodeRef, ResolvedNode, Sitemap, SitemapBuilder, build_sitemap

__all__ = [
    "NotionClient",
    "SitemapConfig",
    "SitemapBuilder",
    "Sitemap",
    "NodeKind",
    "NodeRef",
    "ResolvedNode",
    "Result",
    "ApiError",
    "UnknownError",
    "ConfigurationError",
    "build_sitemap",
]
