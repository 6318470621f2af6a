"""Cache key generation for catalog resources.

Keys are plain, readable strings built with a fixed prefix discipline so
that invalidation can sweep whole families with glob patterns:

    bouquet:<id>                       detail
    bouquet:<id>:tags                  sub-resource
    bouquets:list[:category:<id>][:limit:<n>][:with-flowers]
    featured:bouquets[:category:<id>][:limit:<n>][:with-flowers]
    category:<id>:bouquets             parent-scoped list
    flowers:list[:with-colors]
    colors:list, color:<id>

New modifiers must be appended after the existing ones, never inserted,
or the sweep patterns in flowershop.cache.invalidation stop matching.
"""

from dataclasses import dataclass
from typing import Dict, Optional

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Resource:
    """Naming facts about a cached catalog resource."""

    name: str
    plural: str
    related_flag: Optional[str] = None
    parent: Optional[str] = None


RESOURCES: Dict[str, Resource] = {
    "bouquet": Resource("bouquet", "bouquets", related_flag="with-flowers", parent="category"),
    "flower": Resource("flower", "flowers", related_flag="with-colors"),
    "category": Resource("category", "categories"),
    "tag": Resource("tag", "tags"),
    "color": Resource("color", "colors"),
}


def get_resource(name: str) -> Resource:
    """
    Look up a resource by its singular name.

    Raises:
        ValueError: If the resource is unknown
    """
    try:
        return RESOURCES[name]
    except KeyError:
        raise ValueError(f"Unknown cache resource: {name}") from None


class CacheKeyGenerator:
    """
    Generate deterministic cache keys for catalog resources.

    All methods are static; the same resource and filter values always
    produce the same key regardless of how the request spelled them.
    """

    @staticmethod
    def detail(resource: str, entity_id: str) -> str:
        """
        Build the detail key for a single entity.

        Example:
            >>> CacheKeyGenerator.detail("bouquet", "4f1c")
            'bouquet:4f1c'
        """
        return f"{get_resource(resource).name}:{entity_id}"

    @staticmethod
    def sub_resource(resource: str, entity_id: str, sub: str) -> str:
        """
        Build the key for a sub-resource of one entity.

        Example:
            >>> CacheKeyGenerator.sub_resource("bouquet", "4f1c", "tags")
            'bouquet:4f1c:tags'
        """
        return f"{CacheKeyGenerator.detail(resource, entity_id)}:{sub}"

    @staticmethod
    def parent_scoped(parent: str, parent_id: str, resource: str) -> str:
        """
        Build the key for a list of entities scoped to one parent.

        Example:
            >>> CacheKeyGenerator.parent_scoped("category", "c1", "bouquet")
            'category:c1:bouquets'
        """
        return f"{get_resource(parent).name}:{parent_id}:{get_resource(resource).plural}"

    @staticmethod
    def list_key(
        resource: str,
        featured: bool = False,
        category_id: Optional[str] = None,
        limit: Optional[int] = None,
        with_related: bool = False,
    ) -> str:
        """
        Build a list key from the resource and its query filters.

        The featured filter switches the base to its own namespace
        ("featured:{plural}") instead of adding a suffix. Modifiers follow
        in a fixed order; the related-entities flag appears only when true.

        Args:
            resource: Singular resource name (e.g. "bouquet")
            featured: Restrict to featured entities
            category_id: Restrict to one category
            limit: Maximum number of entities
            with_related: Embed related entities (flowers, colors, ...)

        Returns:
            Cache key string

        Example:
            >>> CacheKeyGenerator.list_key("bouquet", featured=True, limit=6,
            ...                            with_related=True)
            'featured:bouquets:limit:6:with-flowers'
        """
        info = get_resource(resource)

        parts = [f"featured:{info.plural}" if featured else f"{info.plural}:list"]

        if category_id:
            parts.append(f"category:{category_id}")

        if limit is not None:
            parts.append(f"limit:{int(limit)}")

        if with_related:
            if not info.related_flag:
                raise ValueError(f"Resource {resource} has no related entities")
            parts.append(info.related_flag)

        cache_key = ":".join(parts)

        logger.debug("cache_key_generated", resource=resource, cache_key=cache_key)

        return cache_key


# Convenience singleton instance
key_generator = CacheKeyGenerator()
