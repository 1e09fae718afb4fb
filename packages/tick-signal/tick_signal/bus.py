"""In-process observer registry with synchronous named-signal dispatch."""
from __future__ import annotations

from typing import Any, Callable

Handler = Callable[[str, dict[str, Any]], None]


class SignalBus:
    """Maps signal names to handlers and calls them in registration order.

    ``emit`` dispatches immediately. Handlers registered or removed while a
    signal is being dispatched take effect from the next ``emit``.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Handler]] = {}

    def subscribe(self, signal_name: str, handler: Handler) -> Callable[[], None]:
        """Register a handler. Returns a callable that unsubscribes it."""
        self._subscribers.setdefault(signal_name, []).append(handler)
        return lambda: self.unsubscribe(signal_name, handler)

    def unsubscribe(self, signal_name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(signal_name)
        if handlers is None:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            pass

    def emit(self, signal_name: str, **data: Any) -> int:
        """Dispatch to every handler of ``signal_name``. Returns the handler count."""
        handlers = list(self._subscribers.get(signal_name, ()))
        for handler in handlers:
            handler(signal_name, dict(data))
        return len(handlers)

    def handler_count(self, signal_name: str) -> int:
        return len(self._subscribers.get(signal_name, ()))

    def clear(self, signal_name: str | None = None) -> None:
        """Drop handlers for one signal, or for all signals."""
        if signal_name is None:
            self._subscribers.clear()
        else:
            self._subscribers.pop(signal_name, None)
