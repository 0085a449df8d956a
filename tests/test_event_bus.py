import pytest

from libs.event_bus import NotificationBus


def test_publish_reaches_listeners_in_registration_order() -> None:
    bus = NotificationBus()
    calls = []
    bus.subscribe("update", lambda p: calls.append(("a", p)))
    bus.subscribe("update", lambda p: calls.append(("b", p)))
    bus.subscribe("other", lambda p: calls.append(("c", p)))

    payload = {"speed": 10}
    bus.publish("update", payload)

    assert calls == [("a", payload), ("b", payload)]
    assert calls[0][1] is payload


def test_publish_without_subscribers_is_noop() -> None:
    bus = NotificationBus()
    bus.publish("update", object())
    assert bus.listener_count("update") == 0


def test_unsubscribe_removes_one_registration() -> None:
    bus = NotificationBus()
    calls = []

    def listener(p):
        calls.append(p)

    bus.subscribe("update", listener)
    bus.subscribe("update", listener)
    bus.unsubscribe("update", listener)
    bus.publish("update", 1)
    assert calls == [1]

    bus.unsubscribe("update", listener)
    bus.unsubscribe("update", listener)
    bus.unsubscribe("missing", listener)
    bus.publish("update", 2)
    assert calls == [1]
    assert bus.listener_count("update") == 0


def test_listener_error_propagates_and_stops_delivery() -> None:
    bus = NotificationBus()
    calls = []

    def boom(_p):
        raise RuntimeError("listener failed")

    bus.subscribe("update", calls.append)
    bus.subscribe("update", boom)
    bus.subscribe("update", calls.append)

    with pytest.raises(RuntimeError, match="listener failed"):
        bus.publish("update", "x")
    assert calls == ["x"]


def test_listener_subscribing_during_publish_waits_for_next_publish() -> None:
    bus = NotificationBus()
    late = []

    def first(_p):
        bus.subscribe("update", late.append)

    bus.subscribe("update", first)
    bus.publish("update", 1)
    assert late == []
    bus.publish("update", 2)
    assert late == [2]
