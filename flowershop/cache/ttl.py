"""TTL (Time To Live) policies for cached catalog resources.

Expiration is enforced by the key-value store; these values only decide
what is passed with each SET.
"""

from enum import Enum

import structlog

logger = structlog.get_logger(__name__)


class CacheTTL(Enum):
    """
    Fixed cache TTLs per resource shape, in seconds.

    Catalog data changes only through admin mutations, which invalidate
    explicitly, so TTLs are long and only bound staleness when an
    invalidation is missed.
    """

    BOUQUET_LIST = 3600  # 1 hour
    BOUQUET_DETAIL = 3600  # 1 hour
    BOUQUET_TAGS = 1800  # 30 minutes
    CATEGORY_BOUQUETS = 3600  # 1 hour

    FLOWER_LIST = 3600  # 1 hour
    CATEGORY_LIST = 3600  # 1 hour
    TAG_LIST = 1800  # 30 minutes
    COLOR_LIST = 3600  # 1 hour
    COLOR_DETAIL = 3600  # 1 hour

    DEFAULT = 1800  # 30 minutes

    @staticmethod
    def for_shape(shape: str) -> int:
        """
        Look up the TTL for a cached shape by name.

        Args:
            shape: Lower-case member name (e.g. "bouquet_list")

        Returns:
            TTL in seconds, DEFAULT for unknown shapes

        Example:
            >>> CacheTTL.for_shape("bouquet_tags")
            1800
        """
        try:
            return CacheTTL[shape.upper()].value
        except KeyError:
            logger.warning(
                "unknown_shape_using_default_ttl",
                shape=shape,
                default_ttl=CacheTTL.DEFAULT.value,
            )
            return CacheTTL.DEFAULT.value
