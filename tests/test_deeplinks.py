from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Mapping

import pytest

from producthub.deeplinks import DeepLinkDispatcher, path_segments, resolve_deep_link
from producthub.navigation import NavigationKind, Route


class _RecordingNavigator:
    def __init__(self) -> None:
        self.actions: list[tuple[str, Route | None, dict[str, str]]] = []

    def push(self, route: Route, params: Mapping[str, str]) -> None:
        self.actions.append(("push", route, dict(params)))

    def pop_to_root(self) -> None:
        self.actions.append(("pop", None, {}))


class _RecordingNotifier:
    def __init__(self) -> None:
        self.notices: list[str] = []

    def show_notice(self, text: str) -> None:
        self.notices.append(text)


@pytest.mark.parametrize("uri", ["https://shop.example/cart", "app://cart", "APP://cart/", "http://shop.example/cart/"])
def test_web_and_custom_scheme_links_resolve_the_same(uri: str) -> None:
    action = resolve_deep_link(uri)

    assert action.kind is NavigationKind.PUSH
    assert action.route is Route.CART
    assert action.notice is None


def test_query_parameters_are_carried() -> None:
    action = resolve_deep_link("app://cart?utm_source=push&empty=")

    assert action.params == {"utm_source": "push", "empty": ""}


def test_path_segments() -> None:
    assert path_segments("app://cart/line%2F1") == ["cart", "line/1"]
    assert path_segments("https://shop.example/a//b/") == ["a", "b"]
    assert path_segments("app://") == []


@pytest.mark.parametrize("uri", ["https://shop.example", "https://shop.example/", "app://"])
def test_empty_path_goes_home_silently(uri: str) -> None:
    action = resolve_deep_link(uri)

    assert action.kind is NavigationKind.POP_TO_ROOT
    assert action.notice is None


def test_unknown_path_goes_home_with_notice() -> None:
    action = resolve_deep_link("https://shop.example/wishlist/42")

    assert action.kind is NavigationKind.POP_TO_ROOT
    assert action.notice == "Deep link not recognized: /wishlist/42"


def test_home_route_pushes_home() -> None:
    assert resolve_deep_link("app://home").route is Route.HOME


def test_links_before_first_frame_are_replayed_in_order() -> None:
    notifier = _RecordingNotifier()
    dispatcher = DeepLinkDispatcher(notifier)

    dispatcher.handle_initial("app://cart?from=cold")
    dispatcher.handle("https://shop.example/nowhere")
    dispatcher.handle_initial(None)

    assert dispatcher.queued == 2
    assert not dispatcher.ready

    navigator = _RecordingNavigator()
    dispatcher.attach(navigator)

    assert navigator.actions == [("push", Route.CART, {"from": "cold"}), ("pop", None, {})]
    assert notifier.notices == ["Deep link not recognized: /nowhere"]
    assert dispatcher.queued == 0


def test_link_arriving_during_navigation_waits_its_turn() -> None:
    notifier = _RecordingNotifier()
    order: list[str] = []
    dispatcher: DeepLinkDispatcher

    class _ReentrantNavigator(_RecordingNavigator):
        def push(self, route: Route, params: Mapping[str, str]) -> None:
            order.append(f"start {route}")
            if route is Route.CART:
                dispatcher.handle("app://home")
            order.append(f"end {route}")

    dispatcher = DeepLinkDispatcher(notifier, navigator=_ReentrantNavigator())

    dispatcher.handle("app://cart")

    assert order == ["start cart", "end cart", "start home", "end home"]


def test_failing_navigation_does_not_block_queue() -> None:
    class _BrokenNavigator(_RecordingNavigator):
        def push(self, route: Route, params: Mapping[str, str]) -> None:
            raise RuntimeError("route not mounted")

    navigator = _BrokenNavigator()
    dispatcher = DeepLinkDispatcher(_RecordingNotifier())
    dispatcher.handle("app://cart")
    dispatcher.handle("app://")

    dispatcher.attach(navigator)

    assert navigator.actions == [("pop", None, {})]


def test_malformed_link_shows_notice_and_goes_home() -> None:
    notifier = _RecordingNotifier()
    navigator = _RecordingNavigator()
    dispatcher = DeepLinkDispatcher(notifier, navigator=navigator)

    dispatcher.handle("http://[::1")

    assert navigator.actions == [("pop", None, {})]
    assert notifier.notices == ["Deep link not recognized: http://[::1"]


@pytest.mark.asyncio
async def test_listen_handles_stream_until_it_fails() -> None:
    navigator = _RecordingNavigator()
    dispatcher = DeepLinkDispatcher(_RecordingNotifier(), navigator=navigator)

    async def links() -> AsyncIterator[str]:
        yield "app://cart"
        raise ConnectionError("platform channel closed")

    await dispatcher.listen(links())

    assert navigator.actions == [("push", Route.CART, {})]


@pytest.mark.asyncio
async def test_dispose_stops_listener_and_drops_queue() -> None:
    dispatcher = DeepLinkDispatcher(_RecordingNotifier())
    stream: asyncio.Queue[str] = asyncio.Queue()

    async def links() -> AsyncIterator[str]:
        while True:
            yield await stream.get()

    task = dispatcher.start_listening(links())
    await stream.put("app://cart")
    await asyncio.sleep(0.01)
    assert dispatcher.queued == 1

    dispatcher.dispose()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert dispatcher.queued == 0
    assert not dispatcher.ready
