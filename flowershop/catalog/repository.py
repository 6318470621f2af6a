"""
Catalog repository over the Supabase backing store.

Reads go through the anon-key client, writes through the service-role
client. Related entities for a list are loaded with one batched query per
relation keyed by the parent ids, never one query per parent. This module
knows nothing about caching; callers wrap reads with the cache manager and
invalidate after writes.
"""

import asyncio
import uuid
from typing import Any, Dict, List, Optional

from flowershop.catalog.normalizer import ResponseNormalizer, normalize_bouquet_batch
from flowershop.db.client import SupabaseClient, get_admin_supabase, get_supabase, in_
from flowershop.db.exceptions import NotFoundError
from flowershop.models.requests import (
    BouquetCreate,
    BouquetListParams,
    BouquetUpdate,
    CategoryCreate,
    CategoryUpdate,
    ColorCreate,
    ColorUpdate,
    FlowerCreate,
    FlowerQuantity,
    FlowerUpdate,
    TagCreate,
    TagUpdate,
)
from flowershop.utils.logger import get_logger

logger = get_logger(__name__)

BOUQUET_FLOWERS_SELECT = "bouquet_id,flower_id,quantity,flowers(id,name,price)"


class CatalogRepository:
    """
    Queries and mutations for bouquets, flowers, categories, tags and colors.

    Args:
        reader: Client for reads (defaults to the anon client)
        writer: Client for writes (defaults to the service-role client)
    """

    def __init__(
        self,
        reader: Optional[SupabaseClient] = None,
        writer: Optional[SupabaseClient] = None,
    ) -> None:
        self._reader = reader
        self._writer = writer

    @property
    def reader(self) -> SupabaseClient:
        if self._reader is None:
            self._reader = get_supabase()
        return self._reader

    @property
    def writer(self) -> SupabaseClient:
        if self._writer is None:
            self._writer = get_admin_supabase()
        return self._writer

    # Bouquets

    async def _bouquet_relations(self, bouquet_ids: List[str]):
        ids = in_(bouquet_ids)
        return await asyncio.gather(
            self.reader.select(
                "bouquet_flowers",
                select=BOUQUET_FLOWERS_SELECT,
                filters={"bouquet_id": ids},
            ),
            self.reader.select(
                "bouquet_media",
                filters={"bouquet_id": ids},
                order="display_order.asc",
            ),
        )

    async def list_bouquets(
        self, params: BouquetListParams, in_stock_only: bool = False
    ) -> List[Dict[str, Any]]:
        """
        List bouquets matching the filters.

        Args:
            params: Validated list filters
            in_stock_only: Exclude bouquets marked out of stock

        Returns:
            Bouquet projections ordered by name (possibly empty)
        """
        filters: Dict[str, Any] = {}
        if params.featured:
            filters["featured"] = True
        if params.category:
            filters["category_id"] = params.category
        if in_stock_only:
            filters["in_stock"] = True

        bouquets = await self.reader.select(
            "bouquets", filters=filters, order="name.asc", limit=params.limit
        )

        if not params.with_flowers or not bouquets:
            return bouquets

        flower_rows, media_rows = await self._bouquet_relations(
            [b["id"] for b in bouquets]
        )

        logger.debug(
            "bouquet_relations_loaded",
            bouquets=len(bouquets),
            flower_rows=len(flower_rows),
            media_rows=len(media_rows),
        )

        return normalize_bouquet_batch(bouquets, flower_rows, media_rows)

    async def list_category_bouquets(self, category_id: str) -> List[Dict[str, Any]]:
        """In-stock bouquets of one category, with flowers and media."""
        return await self.list_bouquets(
            BouquetListParams(category=category_id, with_flowers=True),
            in_stock_only=True,
        )

    async def get_bouquet(self, bouquet_id: str) -> Dict[str, Any]:
        """
        Fetch one bouquet with its flowers and media.

        Raises:
            NotFoundError: No bouquet has this id
        """
        try:
            bouquet = await self.reader.select(
                "bouquets", filters={"id": bouquet_id}, single=True
            )
        except NotFoundError:
            raise NotFoundError("bouquet", bouquet_id) from None

        flower_rows, media_rows = await self._bouquet_relations([bouquet_id])
        return ResponseNormalizer.normalize_bouquet(bouquet, flower_rows, media_rows)

    async def get_bouquet_tags(self, bouquet_id: str) -> List[Dict[str, Any]]:
        """Tags attached to a bouquet (empty list when none)."""
        links = await self.reader.select(
            "bouquet_tags", select="tag_id", filters={"bouquet_id": bouquet_id}
        )
        if not links:
            return []

        return await self.reader.select(
            "tags",
            filters={"id": in_(link["tag_id"] for link in links)},
            order="name.asc",
        )

    async def _replace_bouquet_flowers(
        self, bouquet_id: str, flowers: List[FlowerQuantity]
    ) -> None:
        await self.writer.delete("bouquet_flowers", filters={"bouquet_id": bouquet_id})
        await self.writer.insert(
            "bouquet_flowers",
            [
                {"bouquet_id": bouquet_id, "flower_id": f.id, "quantity": f.quantity}
                for f in flowers
            ],
        )

    async def _replace_bouquet_tags(self, bouquet_id: str, tag_ids: List[str]) -> None:
        await self.writer.delete("bouquet_tags", filters={"bouquet_id": bouquet_id})
        await self.writer.insert(
            "bouquet_tags",
            [{"bouquet_id": bouquet_id, "tag_id": tag_id} for tag_id in tag_ids],
        )

    async def create_bouquet(self, payload: BouquetCreate) -> Dict[str, Any]:
        """
        Create a bouquet and its flower composition.

        The bouquet row is the commit point: a failure storing the
        composition afterwards is logged and the created bouquet returned.
        """
        row = {**payload.columns(), "id": str(uuid.uuid4())}
        bouquet = await self.writer.insert("bouquets", [row], single=True)

        if payload.flowers:
            try:
                await self.writer.insert(
                    "bouquet_flowers",
                    [
                        {"bouquet_id": bouquet["id"], "flower_id": f.id, "quantity": f.quantity}
                        for f in payload.flowers
                    ],
                )
            except Exception as e:
                logger.error(
                    "bouquet_flowers_insert_failed",
                    bouquet_id=bouquet["id"],
                    error=str(e),
                    error_type=type(e).__name__,
                )

        if payload.tags:
            try:
                await self.writer.insert(
                    "bouquet_tags",
                    [{"bouquet_id": bouquet["id"], "tag_id": t} for t in payload.tags],
                )
            except Exception as e:
                logger.error(
                    "bouquet_tags_insert_failed",
                    bouquet_id=bouquet["id"],
                    error=str(e),
                    error_type=type(e).__name__,
                )

        return bouquet

    async def update_bouquet(self, bouquet_id: str, payload: BouquetUpdate) -> Dict[str, Any]:
        """
        Update a bouquet; non-empty flowers/tags replace the associations.

        Raises:
            NotFoundError: No bouquet has this id
        """
        columns = payload.columns()

        try:
            if columns:
                bouquet = await self.writer.update(
                    "bouquets", columns, filters={"id": bouquet_id}, single=True
                )
            else:
                bouquet = await self.writer.select(
                    "bouquets", filters={"id": bouquet_id}, single=True
                )
        except NotFoundError:
            raise NotFoundError("bouquet", bouquet_id) from None

        if payload.flowers:
            await self._replace_bouquet_flowers(bouquet_id, payload.flowers)

        if payload.tags:
            await self._replace_bouquet_tags(bouquet_id, payload.tags)

        return bouquet

    async def delete_bouquet(self, bouquet_id: str) -> None:
        """Delete a bouquet after its flower and tag associations."""
        await self.writer.delete("bouquet_flowers", filters={"bouquet_id": bouquet_id})
        await self.writer.delete("bouquet_tags", filters={"bouquet_id": bouquet_id})
        await self.writer.delete("bouquets", filters={"id": bouquet_id})

    # Flowers

    async def list_flowers(self, include_colors: bool = False) -> List[Dict[str, Any]]:
        """All flowers ordered by name, optionally with their colors."""
        flowers = await self.reader.select("flowers", order="name.asc")

        if not include_colors or not flowers:
            return flowers

        color_rows = await self.reader.select(
            "flower_colors",
            select="flower_id,colors(*)",
            filters={"flower_id": in_(f["id"] for f in flowers)},
        )
        colors_by_flower = ResponseNormalizer.group_by(color_rows, "flower_id")

        return [
            ResponseNormalizer.normalize_flower(f, colors_by_flower.get(f["id"], []))
            for f in flowers
        ]

    async def _replace_flower_colors(self, flower_id: str, color_ids: List[str]) -> None:
        await self.writer.delete("flower_colors", filters={"flower_id": flower_id})
        if color_ids:
            await self.writer.insert(
                "flower_colors",
                [{"flower_id": flower_id, "color_id": c} for c in color_ids],
            )

    async def create_flower(self, payload: FlowerCreate) -> Dict[str, Any]:
        flower = await self.writer.insert(
            "flowers", [{**payload.columns(), "id": str(uuid.uuid4())}], single=True
        )
        if payload.colors:
            await self._replace_flower_colors(flower["id"], payload.colors)
        return flower

    async def update_flower(self, flower_id: str, payload: FlowerUpdate) -> Dict[str, Any]:
        columns = payload.columns()
        try:
            if columns:
                flower = await self.writer.update(
                    "flowers", columns, filters={"id": flower_id}, single=True
                )
            else:
                flower = await self.writer.select(
                    "flowers", filters={"id": flower_id}, single=True
                )
        except NotFoundError:
            raise NotFoundError("flower", flower_id) from None

        if payload.colors is not None:
            await self._replace_flower_colors(flower_id, payload.colors)

        return flower

    async def delete_flower(self, flower_id: str) -> None:
        await self.writer.delete("flower_colors", filters={"flower_id": flower_id})
        await self.writer.delete("flowers", filters={"id": flower_id})

    # Categories

    async def list_categories(self) -> List[Dict[str, Any]]:
        return await self.reader.select("categories", order="name.asc")

    async def create_category(self, payload: CategoryCreate) -> Dict[str, Any]:
        return await self.writer.insert(
            "categories", [{**payload.model_dump(), "id": str(uuid.uuid4())}], single=True
        )

    async def update_category(self, category_id: str, payload: CategoryUpdate) -> Dict[str, Any]:
        try:
            return await self.writer.update(
                "categories",
                payload.model_dump(exclude_unset=True),
                filters={"id": category_id},
                single=True,
            )
        except NotFoundError:
            raise NotFoundError("category", category_id) from None

    async def delete_category(self, category_id: str) -> None:
        await self.writer.delete("categories", filters={"id": category_id})

    # Tags

    async def list_tags(self) -> List[Dict[str, Any]]:
        return await self.reader.select("tags", order="name.asc")

    async def create_tag(self, payload: TagCreate) -> Dict[str, Any]:
        return await self.writer.insert(
            "tags", [{**payload.model_dump(), "id": str(uuid.uuid4())}], single=True
        )

    async def update_tag(self, tag_id: str, payload: TagUpdate) -> Dict[str, Any]:
        try:
            return await self.writer.update(
                "tags",
                payload.model_dump(exclude_unset=True),
                filters={"id": tag_id},
                single=True,
            )
        except NotFoundError:
            raise NotFoundError("tag", tag_id) from None

    async def delete_tag(self, tag_id: str) -> None:
        await self.writer.delete("bouquet_tags", filters={"tag_id": tag_id})
        await self.writer.delete("tags", filters={"id": tag_id})

    # Colors

    async def list_colors(self) -> List[Dict[str, Any]]:
        return await self.reader.select("colors", order="name.asc")

    async def get_color(self, color_id: str) -> Dict[str, Any]:
        """
        Fetch one color.

        Raises:
            NotFoundError: No color has this id
        """
        try:
            return await self.reader.select("colors", filters={"id": color_id}, single=True)
        except NotFoundError:
            raise NotFoundError("color", color_id) from None

    async def create_color(self, payload: ColorCreate) -> Dict[str, Any]:
        return await self.writer.insert(
            "colors", [{**payload.model_dump(), "id": str(uuid.uuid4())}], single=True
        )

    async def update_color(self, color_id: str, payload: ColorUpdate) -> Dict[str, Any]:
        try:
            return await self.writer.update(
                "colors",
                payload.model_dump(exclude_unset=True),
                filters={"id": color_id},
                single=True,
            )
        except NotFoundError:
            raise NotFoundError("color", color_id) from None

    async def delete_color(self, color_id: str) -> None:
        """Delete a color after unlinking it from every flower."""
        await self.writer.delete("flower_colors", filters={"color_id": color_id})
        await self.writer.delete("colors", filters={"id": color_id})


def get_repository() -> CatalogRepository:
    """FastAPI dependency returning a repository over the shared clients."""
    return CatalogRepository()
