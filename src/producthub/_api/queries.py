"""GraphQL documents for the Storefront cart API."""

from __future__ import annotations

CART_FIELDS = """
fragment CartFields on Cart {
  id
  checkoutUrl
  totalQuantity
  cost {
    subtotalAmount { amount currencyCode }
    totalAmount { amount currencyCode }
  }
  lines(first: 20) {
    edges {
      node {
        id
        quantity
        merchandise {
          ... on ProductVariant {
            id
            title
            price { amount currencyCode }
            compareAtPrice { amount currencyCode }
            image { url altText }
            product { title handle }
          }
        }
      }
    }
  }
  discountCodes { code applicable }
  discountAllocations {
    discountedAmount { amount currencyCode }
  }
}
"""

GET_CART = (
    """
query GetCart($cartId: ID!) {
  cart(id: $cartId) { ...CartFields }
}
"""
    + CART_FIELDS
)

CREATE_CART = (
    """
mutation CreateCart($lines: [CartLineInput!]) {
  cartCreate(input: { lines: $lines }) {
    cart { ...CartFields }
    userErrors { field message code }
  }
}
"""
    + CART_FIELDS
)

ADD_CART_LINES = (
    """
mutation AddCartLines($cartId: ID!, $lines: [CartLineInput!]!) {
  cartLinesAdd(cartId: $cartId, lines: $lines) {
    cart { ...CartFields }
    userErrors { field message code }
  }
}
"""
    + CART_FIELDS
)

UPDATE_CART_LINES = (
    """
mutation UpdateCartLines($cartId: ID!, $lines: [CartLineUpdateInput!]!) {
  cartLinesUpdate(cartId: $cartId, lines: $lines) {
    cart { ...CartFields }
    userErrors { field message code }
  }
}
"""
    + CART_FIELDS
)
