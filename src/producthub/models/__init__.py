"""Data models for Storefront API responses."""

from producthub.models._base import StorefrontModel, unwrap_connection
from producthub.models.cart import (
    Cart,
    CartCost,
    CartLine,
    CartLineInput,
    CartLineUpdateInput,
    DiscountAllocation,
    DiscountCode,
    Image,
    Merchandise,
    Money,
    ProductRef,
)
from producthub.models.graphql import GraphQLErrorItem, GraphQLResponse, UserError

__all__ = [
    "Cart",
    "CartCost",
    "CartLine",
    "CartLineInput",
    "CartLineUpdateInput",
    "DiscountAllocation",
    "DiscountCode",
    "GraphQLErrorItem",
    "GraphQLResponse",
    "Image",
    "Merchandise",
    "Money",
    "ProductRef",
    "StorefrontModel",
    "UserError",
    "unwrap_connection",
]
