"""Unit tests for cache key generation."""

import pytest

from flowershop.cache.keys import CacheKeyGenerator, get_resource


class TestCacheKeyGenerator:
    """Test suite for CacheKeyGenerator class."""

    def test_detail_key(self):
        """Test detail keys are "<resource>:<id>"."""
        assert CacheKeyGenerator.detail("bouquet", "b1") == "bouquet:b1"
        assert CacheKeyGenerator.detail("flower", "f1") == "flower:f1"
        assert CacheKeyGenerator.detail("category", "c1") == "category:c1"
        assert CacheKeyGenerator.detail("tag", "t1") == "tag:t1"

    def test_sub_resource_key(self):
        """Test sub-resource keys extend the detail key."""
        assert CacheKeyGenerator.sub_resource("bouquet", "b1", "tags") == "bouquet:b1:tags"

    def test_parent_scoped_key(self):
        """Test parent-scoped list keys use the child's plural."""
        key = CacheKeyGenerator.parent_scoped("category", "c1", "bouquet")

        assert key == "category:c1:bouquets"

    def test_plain_list_key(self):
        """Test list key without filters."""
        assert CacheKeyGenerator.list_key("bouquet") == "bouquets:list"
        assert CacheKeyGenerator.list_key("category") == "categories:list"
        assert CacheKeyGenerator.list_key("tag") == "tags:list"

    def test_featured_switches_namespace(self):
        """Test featured lists live under their own prefix."""
        assert CacheKeyGenerator.list_key("bouquet", featured=True) == "featured:bouquets"

    def test_modifier_order_is_fixed(self):
        """Test category, limit and related flag always appear in that order."""
        key = CacheKeyGenerator.list_key(
            "bouquet", featured=True, category_id="c1", limit=6, with_related=True
        )

        assert key == "featured:bouquets:category:c1:limit:6:with-flowers"

    def test_related_flag_only_when_true(self):
        """Test the related flag is omitted when false."""
        key = CacheKeyGenerator.list_key("bouquet", limit=10, with_related=False)

        assert key == "bouquets:list:limit:10"

    def test_flower_related_flag(self):
        """Test flowers use the with-colors flag."""
        assert CacheKeyGenerator.list_key("flower", with_related=True) == "flowers:list:with-colors"
        assert CacheKeyGenerator.list_key("flower") == "flowers:list"

    def test_same_filters_same_key(self):
        """Test the same filter values always produce the same key."""
        key1 = CacheKeyGenerator.list_key("bouquet", category_id="c1", limit=3)
        key2 = CacheKeyGenerator.list_key("bouquet", limit=3, category_id="c1")

        assert key1 == key2

    def test_different_filters_different_keys(self):
        """Test distinct query shapes never share a key."""
        keys = {
            CacheKeyGenerator.list_key("bouquet"),
            CacheKeyGenerator.list_key("bouquet", with_related=True),
            CacheKeyGenerator.list_key("bouquet", featured=True),
            CacheKeyGenerator.list_key("bouquet", limit=5),
            CacheKeyGenerator.list_key("bouquet", category_id="c1"),
        }

        assert len(keys) == 5

    def test_related_flag_on_resource_without_relations(self):
        """Test requesting related entities on tags is rejected."""
        with pytest.raises(ValueError):
            CacheKeyGenerator.list_key("tag", with_related=True)

    def test_unknown_resource(self):
        """Test unknown resources are rejected."""
        with pytest.raises(ValueError, match="Unknown cache resource"):
            CacheKeyGenerator.detail("vase", "v1")

    def test_get_resource(self):
        """Test resource lookup exposes naming facts."""
        bouquet = get_resource("bouquet")

        assert bouquet.plural == "bouquets"
        assert bouquet.related_flag == "with-flowers"
        assert bouquet.parent == "category"

    def test_color_keys(self):
        """Test colors have list and detail keys but no related flag."""
        assert CacheKeyGenerator.list_key("color") == "colors:list"
        assert CacheKeyGenerator.detail("color", "red") == "color:red"
        with pytest.raises(ValueError):
            CacheKeyGenerator.list_key("color", with_related=True)
