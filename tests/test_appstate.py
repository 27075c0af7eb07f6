import pytest

from flowcontrib.activity import ActivityContext, InitContext
from flowcontrib.appstate import (
    AppDataActivity,
    Counter,
    CounterActivity,
    get_app_value,
    get_counter,
    set_app_value,
)
from flowcontrib.coerce import CoercionError


def test_set():
    act = AppDataActivity.from_context(InitContext(settings={"name": "test_set", "op": "set"}))
    ctx = ActivityContext(inputs={"value": "foo"})
    assert act.eval(ctx) is True
    assert get_app_value("test_set") == "foo"


def test_get():
    set_app_value("test_get", "bar")
    act = AppDataActivity.from_context(InitContext(settings={"name": "test_get", "op": "get"}))
    ctx = ActivityContext(inputs={"value": "bar"})
    act.eval(ctx)
    assert ctx.get_output("value") == "bar"
    assert get_app_value("test_get") == "bar"


def test_get_missing_outputs_none():
    act = AppDataActivity.from_context(InitContext(settings={"name": "never_set_value"}))
    ctx = ActivityContext()
    act.eval(ctx)
    assert ctx.get_output("value") is None
    assert "value" in ctx.outputs


def test_set_with_type_coerces():
    act = AppDataActivity.from_context(
        InitContext(settings={"name": "typed", "op": "set", "type": "int"})
    )
    act.eval(ActivityContext(inputs={"value": "42"}))
    assert get_app_value("typed") == 42


def test_get_with_type_coerces():
    set_app_value("typed_get", 5)
    act = AppDataActivity.from_context(InitContext(settings={"name": "typed_get", "type": "string"}))
    ctx = ActivityContext()
    act.eval(ctx)
    assert ctx.get_output("value") == "5"


def test_appdata_requires_name():
    with pytest.raises(ValueError):
        AppDataActivity.from_context(InitContext(settings={"op": "set"}))


def test_appdata_rejects_unknown_op():
    with pytest.raises(ValueError):
        AppDataActivity.from_context(InitContext(settings={"name": "x", "op": "delete"}))


def test_appdata_rejects_unknown_type():
    with pytest.raises(CoercionError):
        AppDataActivity.from_context(InitContext(settings={"name": "x", "type": "nope"}))


def test_increment():
    act = CounterActivity.from_context(
        InitContext(settings={"counterName": "test_increment", "op": "increment"})
    )
    ctx = ActivityContext()
    act.eval(ctx)
    assert ctx.get_output("value") == 1


def test_get_counter_value():
    act = CounterActivity.from_context(InitContext(settings={"counterName": "test_get", "op": "get"}))
    counter = get_counter("test_get")
    counter.reset()
    counter.increment()
    counter.increment()
    counter.increment()
    ctx = ActivityContext()
    act.eval(ctx)
    assert ctx.get_output("value") == 3


def test_reset():
    act = CounterActivity.from_context(
        InitContext(settings={"counterName": "test_reset", "op": "reset"})
    )
    counter = get_counter("test_reset")
    counter.reset()
    counter.increment()
    counter.increment()
    counter.increment()
    ctx = ActivityContext()
    act.eval(ctx)
    assert ctx.get_output("value") == 0
    assert counter.get() == 0


def test_counter_shared_by_name():
    first = get_counter("shared")
    first.reset()
    assert first.increment() == 1
    assert get_counter("shared").get() == 1
    assert get_counter("shared").increment() == 2
    assert first.get() == 2


def test_counter_methods():
    counter = Counter()
    assert counter.increment() == 1
    assert counter.increment() == 2
    assert counter.get() == 2
    assert counter.reset() == 0


def test_counter_requires_name():
    with pytest.raises(ValueError):
        CounterActivity.from_context(InitContext(settings={"op": "get"}))


def test_counter_rejects_unknown_op():
    with pytest.raises(ValueError):
        CounterActivity.from_context(InitContext(settings={"counterName": "c", "op": "double"}))