"""Native <-> dynamic UI bridge.

The shared :class:`StateStore` and the :class:`MessageRouter` are the only
mutable state shared between native code and remotely defined pages. Both
run on the app's single event loop and need no locking.
"""

from producthub.bridge.binding import interpolate, resolve_path
from producthub.bridge.context import Bridge
from producthub.bridge.lifecycle import Disposable, Disposer, Scope
from producthub.bridge.router import HandlerRegistration, Message, MessageRouter
from producthub.bridge.state import StateStore, Subscription

__all__ = [
    "Bridge",
    "Disposable",
    "Disposer",
    "HandlerRegistration",
    "Message",
    "MessageRouter",
    "Scope",
    "StateStore",
    "Subscription",
    "interpolate",
    "resolve_path",
]
