from pairpals.events.bus import EventBus


def test_event_bus_emit_subscribe():
    bus = EventBus()
    received = {}

    def handler(sender, **kwargs):
        received.update(kwargs)

    bus.subscribe("test", handler)
    bus.emit("test", value=42, msg="hello")

    assert received["value"] == 42
    assert received["msg"] == "hello"


def test_event_bus_preserves_subscription_order():
    bus = EventBus()
    order = []
    bus.subscribe("test", lambda sender, **_: order.append("first"))
    bus.subscribe("test", lambda sender, **_: order.append("second"))

    bus.emit("test")

    assert order == ["first", "second"]


def test_event_bus_emit_without_subscribers_is_noop():
    bus = EventBus()
    bus.emit("nobody_listens", value=1)


def test_event_bus_unsubscribe():
    bus = EventBus()
    calls = []

    def handler(sender, **kwargs):
        calls.append(kwargs)

    bus.subscribe("test", handler)
    bus.unsubscribe("test", handler)
    bus.emit("test", value=1)

    assert calls == []
