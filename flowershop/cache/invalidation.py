"""Cache invalidation after catalog mutations.

Every mutation of an entity deletes the entity's own keys and sweeps each
list-shaped key family whose payload could embed it. Invalidation runs
once the mutation has returned or raised, never before its first write, so
a partially applied write is swept as well. Its own failures are logged
and never fail the mutating request.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import structlog

from flowershop.cache.keys import CacheKeyGenerator, get_resource
from flowershop.cache.manager import CacheManager, cache_manager

logger = structlog.get_logger(__name__)


@dataclass
class InvalidationPlan:
    """Keys and glob patterns to delete for one mutated entity."""

    keys: List[str] = field(default_factory=list)
    patterns: List[str] = field(default_factory=list)


def list_patterns(resource: str) -> List[str]:
    """
    Sweep patterns covering every list key of a resource.

    Example:
        >>> list_patterns("bouquet")
        ['bouquets:list*', 'featured:bouquets*', 'category:*:bouquets']
    """
    info = get_resource(resource)
    patterns = [f"{info.plural}:list*", f"featured:{info.plural}*"]
    if info.parent:
        patterns.append(f"{info.parent}:*:{info.plural}")
    return patterns


# Resources whose projections embed another resource's data
EMBEDDED_IN: Dict[str, List[str]] = {
    "flower": ["bouquet"],
    "color": ["flower"],
}


def build_plan(resource: str, entity_id: Optional[str] = None) -> InvalidationPlan:
    """
    Compute the keys and patterns to delete after a mutation.

    Args:
        resource: Singular resource name of the mutated entity
        entity_id: Its id; None for creates before an id is known

    Returns:
        InvalidationPlan for the entity
    """
    plan = InvalidationPlan(patterns=list_patterns(resource))

    if entity_id:
        plan.keys.append(CacheKeyGenerator.detail(resource, entity_id))

        if resource == "bouquet":
            plan.keys.append(CacheKeyGenerator.sub_resource("bouquet", entity_id, "tags"))
        elif resource == "category":
            plan.keys.append(CacheKeyGenerator.parent_scoped("category", entity_id, "bouquet"))
            # Bouquet lists filtered by this category
            bouquets = get_resource("bouquet").plural
            plan.patterns.append(f"{bouquets}:list:category:{entity_id}*")
            plan.patterns.append(f"featured:{bouquets}:category:{entity_id}*")

    if resource == "tag":
        plan.patterns.append("bouquet:*:tags")

    for container in EMBEDDED_IN.get(resource, []):
        for pattern in list_patterns(container):
            if pattern not in plan.patterns:
                plan.patterns.append(pattern)
        plan.patterns.append(f"{get_resource(container).name}:*")

    return plan


async def invalidate_entity(
    resource: str,
    entity_id: Optional[str] = None,
    manager: Optional[CacheManager] = None,
) -> Dict[str, int]:
    """
    Invalidate all cache entries that could hold a mutated entity.

    Call from a finally block around the mutation. Never raises.

    Args:
        resource: Singular resource name (e.g. "bouquet")
        entity_id: Id of the mutated entity
        manager: CacheManager to use (defaults to the global one)

    Returns:
        {"keys": <deleted detail keys>, "patterns": <keys deleted by sweeps>}

    Example:
        >>> try:
        ...     await repository.update_bouquet(bouquet_id, changes)
        ... finally:
        ...     await invalidate_entity("bouquet", bouquet_id)
    """
    manager = manager or cache_manager
    summary = {"keys": 0, "patterns": 0}

    try:
        plan = build_plan(resource, entity_id)

        summary["keys"] = await manager.invalidate_keys(plan.keys)
        for pattern in plan.patterns:
            summary["patterns"] += await manager.invalidate_pattern(pattern)

        logger.info(
            "cache_invalidated_for_mutation",
            resource=resource,
            entity_id=entity_id,
            **summary,
        )

    except Exception as e:
        logger.error(
            "cache_invalidation_failed",
            resource=resource,
            entity_id=entity_id,
            error=str(e),
            error_type=type(e).__name__,
        )

    return summary
