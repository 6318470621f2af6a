"""
Projection assembly for catalog responses.

Turns raw backing-store rows into the JSON shapes the API returns and
caches: related rows fetched in batches are grouped by parent id in memory
and merged into each parent, and denormalized fields (resolved media URLs,
the thumbnail, the display image) are computed here.
"""

import os
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional

DEFAULT_MEDIA_WORKER_URL = "https://flowershop-media-server.pelvity.workers.dev"


def media_worker_url() -> str:
    return os.getenv("MEDIA_WORKER_URL", DEFAULT_MEDIA_WORKER_URL).rstrip("/")


class ResponseNormalizer:
    """
    Normalizer for catalog rows.

    All normalization methods are static and can be called without
    instantiation.

    Example:
        >>> media_by_bouquet = ResponseNormalizer.group_by(media_rows, "bouquet_id")
        >>> projection = ResponseNormalizer.normalize_bouquet(
        ...     bouquet, flower_rows, media_by_bouquet[bouquet["id"]]
        ... )
    """

    @staticmethod
    def group_by(rows: Iterable[Dict[str, Any]], key: str) -> Dict[str, List[Dict[str, Any]]]:
        """Group rows by the value of one column, preserving row order."""
        grouped: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        for row in rows:
            grouped[row.get(key)].append(row)
        return grouped

    @staticmethod
    def resolve_media_url(media: Dict[str, Any]) -> Optional[str]:
        """
        Resolve the public URL of a media row.

        An absolute file_url wins; otherwise the file path is served through
        the media worker.
        """
        file_url = media.get("file_url")
        if file_url and file_url.startswith("http"):
            return file_url

        file_path = media.get("file_path")
        if not file_path:
            return None

        return f"{media_worker_url()}/{file_path.lstrip('/')}"

    @staticmethod
    def normalize_media(media: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": media.get("id"),
            "media_type": media.get("media_type", "image"),
            "file_path": media.get("file_path"),
            "url": ResponseNormalizer.resolve_media_url(media),
            "display_order": media.get("display_order", 0),
            "is_thumbnail": bool(media.get("is_thumbnail")),
        }

    @staticmethod
    def pick_thumbnail(media: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """
        Choose the display media: the flagged thumbnail, else the first item.

        Args:
            media: Normalized media, already sorted by display_order
        """
        for item in media:
            if item["is_thumbnail"]:
                return item
        return media[0] if media else None

    @staticmethod
    def normalize_flower_summary(row: Dict[str, Any]) -> Dict[str, Any]:
        """Summarize a bouquet_flowers row with its embedded flower."""
        flower = row.get("flowers") or {}
        return {
            "id": flower.get("id", row.get("flower_id")),
            "name": flower.get("name"),
            "price": flower.get("price"),
            "quantity": row.get("quantity", 1),
        }

    @staticmethod
    def normalize_bouquet(
        bouquet: Dict[str, Any],
        flower_rows: Optional[List[Dict[str, Any]]] = None,
        media_rows: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """
        Build a bouquet projection.

        Without related rows the bouquet is returned as stored. With them,
        "flowers", "media", "thumbnail" and "image" are added.

        Args:
            bouquet: Row from the bouquets table
            flower_rows: Its bouquet_flowers rows (with embedded flowers)
            media_rows: Its bouquet_media rows

        Returns:
            Bouquet projection dictionary
        """
        projection = dict(bouquet)

        if flower_rows is None and media_rows is None:
            return projection

        media = sorted(
            (ResponseNormalizer.normalize_media(m) for m in media_rows or []),
            key=lambda m: m["display_order"],
        )
        thumbnail = ResponseNormalizer.pick_thumbnail(media)

        projection["flowers"] = [
            ResponseNormalizer.normalize_flower_summary(row) for row in flower_rows or []
        ]
        projection["media"] = media
        projection["thumbnail"] = thumbnail
        projection["image"] = thumbnail["url"] if thumbnail else None

        return projection

    @staticmethod
    def normalize_flower(
        flower: Dict[str, Any], color_rows: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """Build a flower projection, embedding colors when given."""
        projection = dict(flower)
        if color_rows is not None:
            projection["colors"] = [row["colors"] for row in color_rows if row.get("colors")]
        return projection


# Create singleton instance for convenient import
normalizer = ResponseNormalizer()


def normalize_bouquet_batch(
    bouquets: List[Dict[str, Any]],
    flower_rows: List[Dict[str, Any]],
    media_rows: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Merge batched related rows into each bouquet, keeping bouquet order.

    Example:
        >>> normalize_bouquet_batch(bouquets, flower_rows, media_rows)
    """
    flowers_by_bouquet = ResponseNormalizer.group_by(flower_rows, "bouquet_id")
    media_by_bouquet = ResponseNormalizer.group_by(media_rows, "bouquet_id")

    return [
        ResponseNormalizer.normalize_bouquet(
            bouquet,
            flowers_by_bouquet.get(bouquet["id"], []),
            media_by_bouquet.get(bouquet["id"], []),
        )
        for bouquet in bouquets
    ]
