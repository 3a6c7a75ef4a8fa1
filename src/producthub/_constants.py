"""Internal constants shared across the library."""

DEFAULT_API_VERSION = "2025-07"
USER_AGENT = "producthub/1.0"
STOREFRONT_TOKEN_HEADER = "X-Shopify-Storefront-Access-Token"

# ------------------------------------------------------------------
# Shared state keys written by native code and read by UI bindings
# ------------------------------------------------------------------

CART_ID_KEY = "cartId"
CART_ITEM_COUNT_KEY = "cartItemCount"
PAYMENT_RESULT_KEY = "paymentResult"
CART_LOADING_KEY = "cartIsLoading"

DELIVERY_TYPE_WIDGET_ID = "custom/deliverytype-1BsfGx"
