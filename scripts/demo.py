#!/usr/bin/env python3
"""Drive the producthub bridge from the command line.

Examples:

    # post a page message and print the shared state afterwards
    python scripts/demo.py dispatch add_to_cart '{"productId": "p1"}'

    # resolve deep links without a UI
    python scripts/demo.py deeplink app://cart https://shop.example/unknown

    # fetch a cart from the configured store (PRODUCTHUB_STORE_NAME / PRODUCTHUB_STOREFRONT_TOKEN)
    python scripts/demo.py cart gid://shopify/Cart/123
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Mapping
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from producthub import AppConfig, ProductHubApp, Route, interpolate  # noqa: E402


class _PrintingNavigator:
    def push(self, route: Route, params: Mapping[str, str]) -> None:
        print(f"navigate: push {route.value} {dict(params) or ''}".rstrip())

    def pop_to_root(self) -> None:
        print("navigate: pop to root")


class _PrintingNotifier:
    def show_notice(self, text: str) -> None:
        print(f"notice: {text}")


async def _dispatch(app: ProductHubApp, channel: str, payload_text: str | None) -> int:
    payload = json.loads(payload_text) if payload_text else None
    app.bridge.store.update("cartItemCount", 0)
    app.bridge.router.dispatch(channel, payload)
    await app.bridge.router.drain()
    print(json.dumps(app.bridge.store.snapshot(), indent=2, default=str))
    print(interpolate("Items in cart: {{cartItemCount}}", app.bridge.store))
    return 0


async def _deeplink(app: ProductHubApp, links: list[str]) -> int:
    for link in links:
        app.deep_links.handle(link)
    app.attach_navigator(_PrintingNavigator())
    return 0


async def _cart(app: ProductHubApp, cart_id: str) -> int:
    app.bridge.store.update("cartId", cart_id)
    screen = app.open_cart_screen()
    cart = await screen.load()
    screen.unmount()
    if cart is None:
        print("cart unavailable", file=sys.stderr)
        for event in app.analytics.events:
            print(f"  {event.name}: {event.params}", file=sys.stderr)
        return 1
    print(json.dumps(screen.view(), indent=2, default=str))
    return 0


async def _main(args: argparse.Namespace) -> int:
    config = AppConfig.from_env()
    async with ProductHubApp(config, notifier=_PrintingNotifier()) as app:
        if args.command == "dispatch":
            return await _dispatch(app, args.channel, args.payload)
        if args.command == "deeplink":
            return await _deeplink(app, args.links)
        return await _cart(app, args.cart_id)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    dispatch = sub.add_parser("dispatch", help="Post a message on a channel")
    dispatch.add_argument("channel")
    dispatch.add_argument("payload", nargs="?", help="JSON payload")

    deeplink = sub.add_parser("deeplink", help="Resolve deep links")
    deeplink.add_argument("links", nargs="+")

    cart = sub.add_parser("cart", help="Fetch and print a cart")
    cart.add_argument("cart_id")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_main(args))


if __name__ == "__main__":
    raise SystemExit(main())
