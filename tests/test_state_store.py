from __future__ import annotations

from typing import Any

from producthub.bridge.state import StateStore


def test_missing_key_returns_absence_value() -> None:
    store = StateStore()

    assert store.get_value("never-set") is None
    assert store.get_value("never-set", "fallback") == "fallback"
    assert "never-set" not in store


def test_last_write_wins() -> None:
    store = StateStore()

    store.update("cartItemCount", 1)
    store.update("cartItemCount", 2)

    assert store.get_value("cartItemCount") == 2


def test_listener_notified_once_per_update_of_its_key_only() -> None:
    store = StateStore()
    seen: list[Any] = []
    store.listen("cartItemCount", seen.append)

    store.update("cartItemCount", 1)
    store.update("paymentResult", {"success": True})
    store.update("cartItemCount", 2)

    assert seen == [1, 2]


def test_listen_does_not_replay_current_value() -> None:
    store = StateStore()
    store.update("cartId", "gid://shopify/Cart/1")
    seen: list[Any] = []

    store.listen("cartId", seen.append)

    assert seen == []


def test_cancelled_subscription_is_never_invoked_again() -> None:
    store = StateStore()
    seen: list[Any] = []
    subscription = store.listen("k", seen.append)

    subscription.cancel()
    store.update("k", "after-cancel")

    assert seen == []
    assert not subscription.active
    assert store.subscription_count == 0


def test_cancel_is_idempotent() -> None:
    store = StateStore()
    subscription = store.listen("k", lambda _value: None)

    subscription.cancel()
    subscription.cancel()

    assert store.subscription_count == 0


def test_subscription_cancelled_by_earlier_listener_is_skipped() -> None:
    store = StateStore()
    seen: list[str] = []
    second = None

    def first(_value: Any) -> None:
        seen.append("first")
        assert second is not None
        second.cancel()

    store.listen("k", first)
    second = store.listen("k", lambda _value: seen.append("second"))

    store.update("k", 1)

    assert seen == ["first"]


def test_failing_listener_does_not_block_others() -> None:
    store = StateStore()
    seen: list[Any] = []

    def broken(_value: Any) -> None:
        raise RuntimeError("boom")

    store.listen("k", broken)
    store.listen("k", seen.append)

    store.update("k", 42)

    assert seen == [42]
    assert store.get_value("k") == 42


def test_clear_is_a_normal_write() -> None:
    store = StateStore()
    seen: list[Any] = []
    store.update("k", "v")
    store.listen("k", seen.append)

    store.clear("k")

    assert seen == [None]
    assert "k" in store
    assert store.get_value("k", "default") is None


def test_write_then_read_inside_listener_sees_new_value() -> None:
    store = StateStore()
    observed: list[Any] = []
    store.listen("k", lambda _value: observed.append(store.get_value("k")))

    store.update("k", "fresh")

    assert observed == ["fresh"]


def test_close_drops_values_and_subscriptions() -> None:
    store = StateStore()
    subscription = store.listen("k", lambda _value: None)
    store.update("k", 1)

    store.close()

    assert not subscription.active
    assert len(store) == 0
    assert store.subscription_count == 0
