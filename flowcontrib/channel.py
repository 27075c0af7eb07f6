"""Named in-process channels and the activity that publishes to them."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable

from flowcontrib.activity import Activity, ActivityContext
from flowcontrib.coerce import to_string

__all__ = [
    "Channel",
    "ChannelActivity",
    "get_channel",
    "new_channel",
    "start_channels",
    "stop_channels",
]

_log = logging.getLogger(__name__)
_STOP = object()


class Channel:
    """A queue of messages delivered in order to registered callbacks."""

    def __init__(self, name: str, buffer_size: int = 0) -> None:
        if buffer_size < 0:
            raise ValueError("buffer size must not be negative")
        self.name = name
        self.buffer_size = buffer_size
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=buffer_size)
        self._callbacks: list[Callable[[Any], None]] = []
        self._lock = threading.Lock()
        self._worker: threading.Thread | None = None

    def publish(self, data: Any) -> None:
        """Queue data, waiting while the buffer is full."""
        self._queue.put(data)

    def publish_no_wait(self, data: Any) -> bool:
        """Queue data if there is room; return whether it was queued."""
        try:
            self._queue.put_nowait(data)
        except queue.Full:
            return False
        return True

    def register_callback(self, callback: Callable[[Any], None]) -> None:
        """Add a callback that receives every delivered message."""
        with self._lock:
            self._callbacks.append(callback)

    def start(self) -> None:
        """Start delivering queued messages."""
        with self._lock:
            if self._worker is not None:
                return
            self._worker = threading.Thread(
                target=self._run, name=f"channel-{self.name}", daemon=True
            )
            self._worker.start()

    def stop(self) -> None:
        """Stop delivering after the messages already queued."""
        with self._lock:
            worker, self._worker = self._worker, None
        if worker is None:
            return
        self._queue.put(_STOP)
        worker.join()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            with self._lock:
                callbacks = list(self._callbacks)
            for callback in callbacks:
                try:
                    callback(item)
                except Exception:
                    _log.exception("callback on channel '%s' failed", self.name)


_channels: dict[str, Channel] = {}
_registry_lock = threading.Lock()


def new_channel(name: str, buffer_size: int) -> Channel:
    """Create and register a channel; a name may be used only once."""
    with _registry_lock:
        if name in _channels:
            raise ValueError(f"channel '{name}' already exists")
        channel = _channels[name] = Channel(name, buffer_size)
        return channel


def get_channel(name: str) -> Channel | None:
    """Return the registered channel with this name, or None."""
    with _registry_lock:
        return _channels.get(name)


def _all_channels() -> list[Channel]:
    with _registry_lock:
        return list(_channels.values())


def start_channels() -> None:
    """Start every registered channel."""
    for channel in _all_channels():
        channel.start()


def stop_channels() -> None:
    """Stop every registered channel."""
    for channel in _all_channels():
        channel.stop()


class ChannelActivity(Activity):
    """Publishes its data input on the named channel."""

    def eval(self, ctx: ActivityContext) -> bool:
        name = to_string(ctx.get_input("channel"))
        if not name:
            raise ValueError("channel name must be specified")
        channel = get_channel(name)
        if channel is None:
            raise LookupError(f"channel '{name}' not registered with engine")
        data = ctx.get_input("data")
        channel.publish(data)
        ctx.logger.debug("Published on '%s' value: %r", name, data)
        return True