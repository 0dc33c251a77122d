from __future__ import annotations

import logging

import pytest

from lifecell.counter.controllers import CounterController
from lifecell.counter.state import CounterState, Store
from lifecell.shared.core.errors import GateClosedError
from lifecell.shared.core.lifecycle import HostLifecycle, LifecycleEvent
from lifecell.shared.core.lifecycle_gate import LifecycleGate


def _bring_up(lifecycle: HostLifecycle) -> None:
    for event in (LifecycleEvent.ON_CREATE, LifecycleEvent.ON_START, LifecycleEvent.ON_RESUME):
        lifecycle.handle_event(event)


def _tear_down(lifecycle: HostLifecycle) -> None:
    for event in (LifecycleEvent.ON_PAUSE, LifecycleEvent.ON_STOP, LifecycleEvent.ON_DESTROY):
        lifecycle.handle_event(event)


# --- Owner ---


def test_intents_read_modify_write_current_value() -> None:
    counter = CounterState(initial=3)

    counter.increment()
    counter.add_n(-5)
    counter.decrement()
    assert counter.value == -3

    counter.reset()
    assert counter.value == 0


def test_count_view_exposes_no_mutation() -> None:
    counter = CounterState()

    assert counter.count.get() == 0
    assert not hasattr(counter.count, "set")


def test_observed_sequence_for_taps_from_the_start(recorder) -> None:
    counter = CounterState(initial=0)
    counter.count.subscribe(recorder)

    counter.increment()
    counter.increment()
    counter.add_n(10)
    counter.decrement()

    assert recorder.values == [0, 1, 2, 12, 11]


def test_reset_at_zero_still_notifies(recorder) -> None:
    counter = CounterState(initial=0)
    counter.count.subscribe(recorder)

    counter.reset()
    counter.reset()

    assert recorder.values == [0, 0, 0]


def test_counter_seeds_from_config_when_no_initial(isolated_config) -> None:
    (isolated_config).mkdir(parents=True)
    (isolated_config / "project.yaml").write_text("cell:\n  initial_value: 42\n", encoding="utf-8")

    assert CounterState.from_config().value == 42
    assert CounterState.from_config(initial=1).value == 1


def test_on_cleared_is_idempotent_and_warns_about_live_observers(caplog) -> None:
    counter = CounterState(name="leaky")
    counter.count.subscribe(lambda _: None)

    with caplog.at_level(logging.WARNING):
        counter.on_cleared()
        counter.on_cleared()

    assert counter.cleared
    assert caplog.text.count("leaky") == 1


# --- Store ---


def test_store_retains_owner_across_lookups() -> None:
    store = Store(initial_value=5)

    first = store.counter("main")
    first.increment()
    again = store.counter("main", initial=100)

    assert again is first
    assert again.value == 6
    assert "main" in store
    assert store.keys() == ["main"]


def test_store_keys_are_independent() -> None:
    store = Store(initial_value=0)

    store.counter("a").add_n(3)

    assert store.counter("b").value == 0
    assert len(store) == 2


def test_store_get_or_create_calls_factory_once() -> None:
    store = Store()
    calls: list[int] = []

    def factory() -> CounterState:
        calls.append(1)
        return CounterState()

    assert store.get_or_create("x", factory) is store.get_or_create("x", factory)
    assert calls == [1]


def test_store_counter_rejects_foreign_owner() -> None:
    store = Store()
    store.get_or_create("main", lambda: object())

    with pytest.raises(TypeError):
        store.counter("main")


def test_store_remove_and_clear_call_on_cleared() -> None:
    store = Store(initial_value=0)
    a = store.counter("a")
    b = store.counter("b")

    store.remove("a")
    store.remove("missing")
    assert a.cleared and not b.cleared
    assert "a" not in store

    store.clear()
    assert b.cleared
    assert len(store) == 0
    assert store.counter("b") is not b


# --- Host ---


def test_controller_renders_only_while_started() -> None:
    rendered: list[str] = []
    counter = CounterState(initial=0)
    lifecycle = HostLifecycle("screen")
    controller = CounterController(counter, lifecycle, render=rendered.append)

    controller.on_increment_clicked()
    assert controller.rendered == []
    assert controller.text == ""

    _bring_up(lifecycle)
    controller.on_increment_clicked()
    controller.on_add_clicked(3)

    assert controller.rendered == [1, 2, 5]
    assert controller.text == "Count: 5"
    assert rendered == ["Count: 1", "Count: 2", "Count: 5"]


def test_controller_buttons_forward_to_owner() -> None:
    counter = CounterState(initial=0)
    controller = CounterController(counter, HostLifecycle(), threshold="started")

    controller.on_add_clicked(4)
    controller.on_decrement_clicked()
    assert counter.value == 3

    controller.on_reset_clicked()
    assert counter.value == 0


def test_controller_uses_configured_threshold(isolated_config) -> None:
    isolated_config.mkdir(parents=True)
    (isolated_config / "user.yaml").write_text("lifecycle:\n  active_threshold: resumed\n", encoding="utf-8")
    lifecycle = HostLifecycle()
    controller = CounterController(CounterState(initial=2), lifecycle)

    lifecycle.handle_event(LifecycleEvent.ON_CREATE)
    lifecycle.handle_event(LifecycleEvent.ON_START)
    assert controller.rendered == []

    lifecycle.handle_event(LifecycleEvent.ON_RESUME)
    assert controller.rendered == [2]


def test_rotation_keeps_count_and_replays_it_once() -> None:
    store = Store(initial_value=0)
    first_host = HostLifecycle("first")
    first = CounterController(store.counter("main"), first_host, threshold="started")
    _bring_up(first_host)
    first.on_increment_clicked()
    first.on_increment_clicked()

    _tear_down(first_host)
    second_host = HostLifecycle("second")
    second = CounterController(store.counter("main"), second_host, threshold="started")
    _bring_up(second_host)
    second.on_increment_clicked()

    assert first.rendered == [0, 1, 2]
    assert second.rendered == [2, 3]
    assert first.gate.is_destroyed
    with pytest.raises(GateClosedError):
        first.gate.on_host_reaches_active_threshold()


def test_background_writes_replay_only_latest_value() -> None:
    counter = CounterState(initial=5)
    lifecycle = HostLifecycle("screen")
    controller = CounterController(counter, lifecycle, threshold="started")
    _bring_up(lifecycle)
    lifecycle.handle_event(LifecycleEvent.ON_PAUSE)
    lifecycle.handle_event(LifecycleEvent.ON_STOP)
    controller.rendered.clear()

    counter.reset()
    counter.increment()
    lifecycle.handle_event(LifecycleEvent.ON_START)

    assert controller.rendered == [1]


def test_direct_gate_end_to_end_with_counter() -> None:
    counter = CounterState(initial=5)
    received: list[int] = []
    gate = LifecycleGate(counter.count, received.append)

    gate.on_host_leaves_active_threshold()
    counter.reset()
    counter.increment()
    gate.on_host_reaches_active_threshold()

    assert received == [1]
