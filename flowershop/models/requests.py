"""
Pydantic request models for the catalog API.

Validates query filters and admin mutation payloads before they reach the
repository or the cache key scheme.
"""
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class BouquetListParams(BaseModel):
    """
    Filters for bouquet list requests.

    Each distinct combination maps to exactly one cache key.
    """

    featured: bool = Field(False, description="Only featured bouquets")
    category: Optional[str] = Field(None, description="Category id filter")
    limit: Optional[int] = Field(
        None, ge=1, le=100, description="Maximum number of bouquets"
    )
    with_flowers: bool = Field(
        True, description="Embed flowers, media, thumbnail and image"
    )

    @field_validator("category")
    @classmethod
    def blank_category_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class FlowerQuantity(BaseModel):
    """A flower in a bouquet composition."""

    id: str = Field(..., min_length=1, description="Flower id")
    quantity: int = Field(1, ge=1, description="Stems of this flower")


class BouquetCreate(BaseModel):
    """Payload for creating a bouquet."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    discount_price: Optional[float] = Field(None, ge=0)
    category_id: Optional[str] = None
    featured: bool = False
    in_stock: bool = True
    flowers: List[FlowerQuantity] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Spring Tulips",
                "price": 45.0,
                "category_id": "9b2e6a7c-0d5f-4a51-8f0e-3c2a1b7d9e10",
                "featured": True,
                "flowers": [{"id": "f3a1", "quantity": 15}],
            }
        }
    )

    def columns(self) -> dict:
        """Bouquet table columns, without association lists."""
        return self.model_dump(exclude={"flowers", "tags"})


class BouquetUpdate(BaseModel):
    """
    Partial bouquet update.

    Only fields present in the request are written. flowers and tags,
    when given and non-empty, replace the existing associations.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    discount_price: Optional[float] = Field(None, ge=0)
    category_id: Optional[str] = None
    featured: Optional[bool] = None
    in_stock: Optional[bool] = None
    flowers: Optional[List[FlowerQuantity]] = None
    tags: Optional[List[str]] = None

    def columns(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"flowers", "tags"})


class FlowerCreate(BaseModel):
    """Payload for creating a flower."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    in_stock: int = Field(0, ge=0)
    low_stock_threshold: int = Field(5, ge=0)
    colors: List[str] = Field(default_factory=list, description="Color ids")

    def columns(self) -> dict:
        return self.model_dump(exclude={"colors"})


class FlowerUpdate(BaseModel):
    """Partial flower update; colors, when given, replace the existing set."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    in_stock: Optional[int] = Field(None, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    colors: Optional[List[str]] = None

    def columns(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"colors"})


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class TagUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)


HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class ColorCreate(BaseModel):
    """
    Payload for creating a color.

    The hex code is accepted as "hex" or "hex_code" and stored as hex_code.
    """

    name: str = Field(..., min_length=1, max_length=100)
    hex_code: str = Field(
        ...,
        pattern=HEX_COLOR,
        validation_alias=AliasChoices("hex", "hex_code"),
        description="Hex color code, e.g. #ff0000",
    )

    model_config = ConfigDict(
        json_schema_extra={"example": {"name": "Blush Pink", "hex": "#f4c2c2"}}
    )


class ColorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    hex_code: Optional[str] = Field(
        None, pattern=HEX_COLOR, validation_alias=AliasChoices("hex", "hex_code")
    )


class CacheInvalidateRequest(BaseModel):
    """
    Body of the admin bulk invalidation endpoint.

    Either list may be omitted; blank entries are dropped.
    """

    keys: Optional[List[str]] = None
    patterns: Optional[List[str]] = None

    @field_validator("keys", "patterns")
    @classmethod
    def drop_blank(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        return [item.strip() for item in v if item and item.strip()]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "keys": ["bouquet:9b2e6a7c-0d5f-4a51-8f0e-3c2a1b7d9e10"],
                "patterns": ["bouquets:list*", "featured:bouquets*"],
            }
        }
    )
