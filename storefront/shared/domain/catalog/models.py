"""Field shapes of the storefront catalog, cart and order records."""

from __future__ import annotations

import time
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class Product(_WireModel):
    id: str = ""
    name: str = ""
    brand: str = ""
    description: str = ""
    price: float = 0.0
    selected_size: Optional[str] = Field(default=None, alias="selectedSize")
    rating: int = 0
    review_count: int = Field(default=0, alias="reviewCount")
    stock: int = 0
    image_url: str = Field(default="", alias="imageUrl")
    category: Optional[str] = None
    is_favorite: bool = Field(default=False, alias="isFavorite")


class CartItem(_WireModel):
    """A product line in the cart. ``subtotal`` follows price and quantity."""

    id: str = ""
    product_id: str = Field(default="", alias="productId")
    name: str = ""
    price: float = 0.0
    quantity: int = 1
    selected_size: Optional[str] = Field(default=None, alias="selectedSize")
    image_url: str = Field(default="", alias="imageUrl")
    brand: str = ""
    timestamp: int = 0
    subtotal: float = 0.0

    @model_validator(mode="after")
    def _compute_subtotal(self) -> "CartItem":
        self.subtotal = self.price * self.quantity
        return self


class Order(_WireModel):
    id: str = ""
    user_id: str = Field(default="", alias="userId")
    items: List[CartItem] = Field(default_factory=list)
    subtotal: float = 0.0
    tax: float = 0.0
    shipping: float = 0.0
    total: float = 0.0
    payment_method: str = Field(default="", alias="paymentMethod")
    status: str = ""
    timestamp: int = 0


class MediaType(str, Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class MediaContent(_WireModel):
    url: str = ""
    type: MediaType = MediaType.IMAGE
    thumbnail_url: str = Field(default="", alias="thumbnailUrl")  # videos only


class ProductComment(_WireModel):
    user_id: str = Field(default="", alias="userId")
    username: str = "Anonymous"
    user_profile_url: str = Field(default="", alias="userProfileUrl")
    rating: int = 0
    comment: str = ""
    media_urls: List[MediaContent] = Field(default_factory=list, alias="mediaUrls")
    timestamp: int = Field(default_factory=lambda: int(time.time() * 1000))
