"""
Breadth-first discovery of a Notion page tree and Markdown outline rendering
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Set, Tuple

from .client import NotionClient
from .config import SitemapConfig
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

Position = Tuple[int, ...]

ROOT_POSITION: Position = (1,)
INDENT = "\t"
BLOCK_CHILDREN_PAGE_SIZE = 100


class NodeKind(Enum):
    """Kinds of node the traversal can meet, keyed by Notion block type."""

    PAGE = "child_page"
    COLLECTION = "child_database"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class NodeRef:
    """A discovered node and its place in the outline."""

    kind: NodeKind
    id: str
    position: Position

    @property
    def depth(self) -> int:
        return len(self.position) - 1

    def child(self, kind: NodeKind, node_id: str, index: int) -> "NodeRef":
        return NodeRef(kind, node_id, self.position + (index,))


def _plain_text(runs: Any) -> List[str]:
    if not isinstance(runs, list):
        return []
    return [run.get("plain_text") or "" for run in runs if isinstance(run, dict)]


def resolve_title(metadata: Dict[str, Any]) -> Optional[str]:
    """
    Resolve the display title of a page or database.

    Pages keep their title in the ``title`` property (looked up by key, then
    by property id); databases carry a top-level ``title`` rich-text list.
    Plain-text spans are joined in order.

    Returns:
        The title, or None when nothing resolves
    """
    try:
        properties = metadata.get("properties") or {}
        runs = (properties.get("title") or {}).get("title") or []
        if not runs:
            for prop in properties.values():
                if isinstance(prop, dict) and prop.get("id") == "title":
                    runs = prop.get("title") or []
                    break

        database_title = metadata.get("title")
        spans = _plain_text(runs) + _plain_text(database_title)
        return "".join(spans) if spans else None
    except (AttributeError, TypeError) as e:
        logger.debug(f"Could not resolve title of {metadata.get('id')!r}: {e}")
        return None


@dataclass(frozen=True)
class ResolvedNode:
    """A node reference together with the metadata fetched for it."""

    ref: NodeRef
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def id(self) -> str:
        return self.metadata.get("id") or self.ref.id

    @property
    def position(self) -> Position:
        return self.ref.position

    @property
    def depth(self) -> int:
        return self.ref.depth

    @property
    def title(self) -> Optional[str]:
        return resolve_title(self.metadata)

    @property
    def icon(self) -> Optional[str]:
        icon = self.metadata.get("icon")
        return icon.get("emoji") if isinstance(icon, dict) else None

    @property
    def url(self) -> Optional[str]:
        return self.metadata.get("url") or None

    @property
    def label(self) -> str:
        title = self.title or self.id
        if not self.url:
            return title
        icon = f"{self.icon} " if self.icon else ""
        return f"[{icon}{title}]({self.url})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.ref.kind.name.lower(),
            "position": list(self.position),
            "depth": self.depth,
            "title": self.title,
            "url": self.url,
            "icon": self.icon,
        }


def sort_nodes(nodes: List[ResolvedNode]) -> List[ResolvedNode]:
    """
    Order nodes by position.

    Tuples compare element-wise and a strict prefix sorts before its
    extensions, so parents always precede their subtrees.
    """
    return sorted(nodes, key=lambda node: node.position)


def render_outline(nodes: List[ResolvedNode]) -> str:
    """Render already sorted nodes as a tab-indented Markdown list."""
    return "".join(f"{INDENT * node.depth}- {node.label}\n" for node in nodes)


@dataclass
class Sitemap:
    """Resolved nodes of one run, sorted by position."""

    nodes: List[ResolvedNode]

    def to_markdown(self) -> str:
        return render_outline(self.nodes)

    def to_dict(self) -> List[Dict[str, Any]]:
        return [node.to_dict() for node in self.nodes]

    def __len__(self) -> int:
        return len(self.nodes)


class SitemapBuilder:
    """
    Discovers every page and database below a root page, breadth-first.

    Expansion is sequential so sibling indices are deterministic; only the
    final metadata retrieval runs concurrently.
    """

    def __init__(self, client: NotionClient, config: SitemapConfig):
        self.client = client
        self.config = config
        self.logger = logging.getLogger(__name__)

    def limit_collection_members(self, members: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Apply the database member cap.

        With ``suppress_over_limit`` a database above the cap contributes
        nothing. Otherwise the first ``max_collection_members - 1`` members
        are kept, in API order.
        """
        maximum = self.config.max_collection_members
        if self.config.suppress_over_limit and len(members) > maximum:
            self.logger.debug(f"Skipping {len(members)} database pages (more than {maximum})")
            return []
        return members[: maximum - 1]

    async def _expand_page(self, ref: NodeRef) -> List[Tuple[NodeKind, str]]:
        block_result = await self.client.fetch_block(ref.id)
        if not block_result.ok:
            return []
        block = block_result.value
        if not block.get("has_children"):
            return []

        children_result = await self.client.fetch_block_children(
            {"block_id": ref.id, "page_size": BLOCK_CHILDREN_PAGE_SIZE}
        )
        if not children_result.ok:
            return []
        blocks = [b for b in children_result.value.get("results") or [] if isinstance(b, dict)]

        unsupported = [b for b in blocks if b.get("type") == NodeKind.UNSUPPORTED.value]
        if unsupported and self.config.log_unsupported:
            parent_title = (block.get("child_page") or {}).get("title") or ref.id
            self.logger.warning(f"Unsupported block(s) in '{parent_title}'")
            self.logger.warning(f"{unsupported}")

        kinds = {kind.value: kind for kind in NodeKind}
        return [(kinds[b["type"]], b["id"]) for b in blocks if b.get("type") in kinds and b.get("id")]

    async def _expand_collection(self, ref: NodeRef) -> List[Tuple[NodeKind, str]]:
        query_result = await self.client.query_collection(ref.id, self.config.collection_filter)
        if not query_result.ok:
            return []
        members = query_result.value.get("results") or []
        return [
            (NodeKind.PAGE, member["id"])
            for member in self.limit_collection_members(members)
            if isinstance(member, dict) and member.get("id")
        ]

    async def expand(self, ref: NodeRef) -> List[NodeRef]:
        """
        Fetch the direct children of one node.

        Returns:
            Child references positioned under ``ref``, in API order
        """
        if ref.kind is NodeKind.PAGE:
            candidates = await self._expand_page(ref)
        elif ref.kind is NodeKind.COLLECTION:
            candidates = await self._expand_collection(ref)
        else:
            candidates = []
        return [ref.child(kind, node_id, index) for index, (kind, node_id) in enumerate(candidates)]

    async def discover(self, root_id: str) -> List[NodeRef]:
        """
        Walk the tree breadth-first from ``root_id``.

        Returns:
            Every discovered reference (the root excluded), in discovery order
        """
        queue: Deque[NodeRef] = deque([NodeRef(NodeKind.PAGE, root_id, ROOT_POSITION)])
        discovered: Set[NodeRef] = set()
        order: List[NodeRef] = []
        max_depth = self.config.max_depth
        previous_level = len(ROOT_POSITION)

        while queue:
            ref = queue.popleft()

            if max_depth and len(ref.position) > max_depth:
                self.logger.info(f"Reached maximum nest level {max_depth}, dropping {len(queue) + 1} queued pages")
                break

            if len(ref.position) > previous_level:
                self.logger.info(f"Now at nest level {len(ref.position)} ({len(queue)} pages)...")

            for child in await self.expand(ref):
                if child not in discovered:
                    discovered.add(child)
                    order.append(child)
                    queue.append(child)

            previous_level = len(ref.position)
            if queue and self.config.delay:
                await asyncio.sleep(self.config.delay)

        return order

    async def resolve(self, ref: NodeRef) -> ResolvedNode:
        """Fetch full metadata for a reference; failures keep an empty record."""
        if ref.kind is NodeKind.PAGE:
            result = await self.client.fetch_document(ref.id)
        elif ref.kind is NodeKind.COLLECTION:
            result = await self.client.fetch_collection_metadata(ref.id)
        else:
            return ResolvedNode(ref, {"id": ref.id, "type": ref.kind.value})
        return ResolvedNode(ref, result.unwrap_or({}) or {})

    async def run(self) -> Sitemap:
        """
        Discover, resolve and sort the whole tree.

        Raises:
            ConfigurationError: no root page id is configured
        """
        root_id = self.config.root_id
        if not root_id:
            raise ConfigurationError("Invalid root page id!")

        self.logger.info("Starting execution...")
        discovered = await self.discover(root_id)

        self.logger.info(f"Generating page tree ({len(discovered)} pages)...")
        root = NodeRef(NodeKind.PAGE, root_id, ROOT_POSITION)
        resolved = await asyncio.gather(*(self.resolve(ref) for ref in [root, *discovered]))

        self.logger.info("Generating sitemap...")
        sitemap = Sitemap(sort_nodes(list(resolved)))
        self.logger.info("Generated sitemap!")
        return sitemap


async def build_sitemap(config: SitemapConfig, client: Optional[NotionClient] = None) -> Sitemap:
    """
    Build a sitemap for ``config``, creating a client from it when none is given.
    """
    own_client = client is None
    if own_client:
        config.validate()
        client = NotionClient(config.token, timeout=config.timeout)
    try:
        return await SitemapBuilder(client, config).run()
    finally:
        if own_client:
            client.close()
