import threading

import pytest

from flowcontrib.activity import ActivityContext
from flowcontrib.channel import (
    Channel,
    ChannelActivity,
    get_channel,
    new_channel,
    start_channels,
    stop_channels,
)


def test_eval_publishes_to_callback():
    channel = new_channel("test-eval", 5)
    ctx = ActivityContext(inputs={"channel": "test-eval", "data": 2})
    assert ChannelActivity().eval(ctx) is True

    found = []
    received = threading.Event()

    def callback(message):
        found.append(message)
        received.set()

    channel.register_callback(callback)
    start_channels()
    try:
        assert received.wait(2.0)
        assert found == [2]
    finally:
        stop_channels()


def test_messages_delivered_in_order():
    channel = Channel("ordered", 10)
    seen = []
    channel.register_callback(seen.append)
    for value in (1, 2, 3):
        channel.publish(value)
    channel.start()
    channel.stop()
    assert seen == [1, 2, 3]


def test_publish_no_wait_reports_full():
    channel = Channel("small", 1)
    assert channel.publish_no_wait("a") is True
    assert channel.publish_no_wait("b") is False


def test_missing_channel_name():
    with pytest.raises(ValueError):
        ChannelActivity().eval(ActivityContext(inputs={"data": 1}))


def test_unregistered_channel():
    with pytest.raises(LookupError):
        ChannelActivity().eval(ActivityContext(inputs={"channel": "nowhere", "data": 1}))


def test_duplicate_channel_rejected():
    new_channel("dup", 1)
    with pytest.raises(ValueError):
        new_channel("dup", 1)


def test_get_channel():
    created = new_channel("lookup", 2)
    assert get_channel("lookup") is created
    assert get_channel("unknown-channel") is None


def test_negative_buffer_rejected():
    with pytest.raises(ValueError):
        Channel("neg", -1)