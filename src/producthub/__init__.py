"""producthub - native glue between a server-driven UI layer and a commerce backend."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("producthub")
except PackageNotFoundError:
    __version__ = "0+local"
from producthub.app import ProductHubApp
from producthub.bridge import Bridge, Message, MessageRouter, Scope, StateStore, Subscription, interpolate
from producthub.client import StorefrontClient
from producthub.config import AppConfig, Environment, FeatureFlags, InitStrategy, IntegrationMode, StorefrontConfig
from producthub.deeplinks import DeepLinkDispatcher, resolve_deep_link
from producthub.exceptions import (
    ProductHubConfigError,
    ProductHubError,
    ProductHubGraphQLError,
    ProductHubTransportError,
)
from producthub.models import Cart, CartLine, CartLineInput, CartLineUpdateInput, GraphQLResponse, Money
from producthub.navigation import NavigationAction, NavigationKind, Route

__all__ = [
    "__version__",
    "AppConfig",
    "Bridge",
    "Cart",
    "CartLine",
    "CartLineInput",
    "CartLineUpdateInput",
    "DeepLinkDispatcher",
    "Environment",
    "FeatureFlags",
    "GraphQLResponse",
    "InitStrategy",
    "IntegrationMode",
    "Message",
    "MessageRouter",
    "Money",
    "NavigationAction",
    "NavigationKind",
    "ProductHubApp",
    "ProductHubConfigError",
    "ProductHubError",
    "ProductHubGraphQLError",
    "ProductHubTransportError",
    "Route",
    "Scope",
    "StateStore",
    "StorefrontClient",
    "StorefrontConfig",
    "Subscription",
    "interpolate",
    "resolve_deep_link",
]
