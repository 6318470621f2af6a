"""Unit tests for mutation-driven cache invalidation."""

from unittest.mock import AsyncMock

import fakeredis
import pytest

from flowershop.cache.connection import RedisCache
from flowershop.cache.invalidation import build_plan, invalidate_entity, list_patterns
from flowershop.cache.manager import CacheManager


class TestBuildPlan:
    """Test suite for invalidation plans per entity type."""

    def test_list_patterns_bouquet(self):
        """Test bouquet list families include the category-scoped lists."""
        assert list_patterns("bouquet") == [
            "bouquets:list*",
            "featured:bouquets*",
            "category:*:bouquets",
        ]

    def test_bouquet_plan(self):
        """Test a bouquet mutation drops its detail and tags keys."""
        plan = build_plan("bouquet", "b1")

        assert plan.keys == ["bouquet:b1", "bouquet:b1:tags"]
        assert "bouquets:list*" in plan.patterns
        assert "featured:bouquets*" in plan.patterns
        assert "category:*:bouquets" in plan.patterns

    def test_bouquet_plan_without_id(self):
        """Test a create before an id is known still sweeps the lists."""
        plan = build_plan("bouquet")

        assert plan.keys == []
        assert "bouquets:list*" in plan.patterns

    def test_flower_plan_sweeps_bouquets(self):
        """Test flower mutations sweep every bouquet family embedding flowers."""
        plan = build_plan("flower", "f1")

        assert plan.keys == ["flower:f1"]
        assert "flowers:list*" in plan.patterns
        assert "bouquets:list*" in plan.patterns
        assert "featured:bouquets*" in plan.patterns
        assert "category:*:bouquets" in plan.patterns
        assert "bouquet:*" in plan.patterns

    def test_category_plan(self):
        """Test category mutations drop the category's bouquet list."""
        plan = build_plan("category", "c1")

        assert plan.keys == ["category:c1", "category:c1:bouquets"]
        assert "categories:list*" in plan.patterns
        assert "bouquets:list:category:c1*" in plan.patterns
        assert "featured:bouquets:category:c1*" in plan.patterns

    def test_color_plan_sweeps_flowers(self):
        """Test color mutations sweep the flower lists embedding colors."""
        plan = build_plan("color", "red")

        assert plan.keys == ["color:red"]
        assert "colors:list*" in plan.patterns
        assert "flowers:list*" in plan.patterns
        assert "bouquets:list*" not in plan.patterns

    def test_tag_plan(self):
        """Test tag mutations sweep every bouquet tag list."""
        plan = build_plan("tag", "t1")

        assert plan.keys == ["tag:t1"]
        assert "tags:list*" in plan.patterns
        assert "bouquet:*:tags" in plan.patterns

    def test_patterns_are_unique(self):
        """Test no pattern is swept twice."""
        for resource in ("bouquet", "flower", "category", "tag", "color"):
            plan = build_plan(resource, "x")
            assert len(plan.patterns) == len(set(plan.patterns))


class TestInvalidateEntity:
    """Test suite for invalidate_entity()."""

    @pytest.fixture
    def fake_manager(self):
        connection = RedisCache()
        connection.client = fakeredis.FakeAsyncRedis(
            server=fakeredis.FakeServer(), decode_responses=True
        )
        return CacheManager(connection)

    @pytest.mark.asyncio
    async def test_bouquet_mutation_clears_every_bouquet_view(self, fake_manager):
        """Test list, featured, detail, tags and category views are dropped."""
        keys = [
            "bouquets:list",
            "bouquets:list:with-flowers",
            "bouquets:list:category:c1:limit:3:with-flowers",
            "featured:bouquets:limit:6:with-flowers",
            "bouquet:b1",
            "bouquet:b1:tags",
            "category:c1:bouquets",
        ]
        for key in keys:
            await fake_manager.set(key, [], ttl=60)
        await fake_manager.set("bouquet:b2", {"id": "b2"}, ttl=60)
        await fake_manager.set("flowers:list", [], ttl=60)

        await invalidate_entity("bouquet", "b1", manager=fake_manager)

        for key in keys:
            assert await fake_manager.get(key) is None
        assert await fake_manager.get("bouquet:b2") == {"id": "b2"}
        assert await fake_manager.get("flowers:list") == []

    @pytest.mark.asyncio
    async def test_flower_mutation_clears_bouquet_details(self, fake_manager):
        """Test flower edits reach bouquet details that embed the flower."""
        await fake_manager.set("flower:f1", {"id": "f1"}, ttl=60)
        await fake_manager.set("flowers:list:with-colors", [], ttl=60)
        await fake_manager.set("bouquet:b1", {"id": "b1"}, ttl=60)
        await fake_manager.set("categories:list", [], ttl=60)

        await invalidate_entity("flower", "f1", manager=fake_manager)

        assert await fake_manager.get("flower:f1") is None
        assert await fake_manager.get("flowers:list:with-colors") is None
        assert await fake_manager.get("bouquet:b1") is None
        assert await fake_manager.get("categories:list") == []

    @pytest.mark.asyncio
    async def test_category_mutation_clears_filtered_lists(self, fake_manager):
        """Test lists filtered by the category are dropped, others kept."""
        await fake_manager.set("bouquets:list:category:c1:with-flowers", [], ttl=60)
        await fake_manager.set("featured:bouquets:category:c1:limit:3", [], ttl=60)
        await fake_manager.set("bouquets:list:category:c2", [], ttl=60)

        await invalidate_entity("category", "c1", manager=fake_manager)

        assert await fake_manager.get("bouquets:list:category:c1:with-flowers") is None
        assert await fake_manager.get("featured:bouquets:category:c1:limit:3") is None
        assert await fake_manager.get("bouquets:list:category:c2") == []

    @pytest.mark.asyncio
    async def test_color_mutation_clears_flower_lists(self, fake_manager):
        """Test color edits reach the flower lists, not bouquet views."""
        await fake_manager.set("colors:list", [], ttl=60)
        await fake_manager.set("color:red", {"id": "red"}, ttl=60)
        await fake_manager.set("flowers:list:with-colors", [], ttl=60)
        await fake_manager.set("bouquet:b1", {"id": "b1"}, ttl=60)

        await invalidate_entity("color", "red", manager=fake_manager)

        assert await fake_manager.get("colors:list") is None
        assert await fake_manager.get("color:red") is None
        assert await fake_manager.get("flowers:list:with-colors") is None
        assert await fake_manager.get("bouquet:b1") == {"id": "b1"}

    @pytest.mark.asyncio
    async def test_returns_summary(self, fake_manager):
        """Test the summary counts detail keys and swept keys."""
        await fake_manager.set("tag:t1", {}, ttl=60)
        await fake_manager.set("tags:list", [], ttl=60)
        await fake_manager.set("bouquet:b1:tags", [], ttl=60)

        summary = await invalidate_entity("tag", "t1", manager=fake_manager)

        assert summary == {"keys": 1, "patterns": 2}

    @pytest.mark.asyncio
    async def test_failures_never_raise(self):
        """Test invalidation faults are swallowed."""
        manager = AsyncMock()
        manager.invalidate_keys.side_effect = RuntimeError("boom")

        summary = await invalidate_entity("bouquet", "b1", manager=manager)

        assert summary == {"keys": 0, "patterns": 0}

    @pytest.mark.asyncio
    async def test_unknown_resource_never_raises(self, fake_manager):
        """Test an unknown resource is logged, not raised."""
        summary = await invalidate_entity("vase", "v1", manager=fake_manager)

        assert summary == {"keys": 0, "patterns": 0}
