"""Per-instrumentation event bus carrying field discovery and hit events."""

from dataclasses import dataclass, field

DISCOVERED = "discovered"
HIT = "hit"

EVENT_KINDS = (DISCOVERED, HIT)


@dataclass(frozen=True)
class FieldEvent:
    """A single ``discovered`` or ``hit`` event for a ``(type, field)`` pair.

    ``raw_type`` and ``raw_field`` carry the graphql-core objects for
    consumers that need more than the names; they take no part in equality.
    """

    kind: str
    type_name: str
    field_name: str
    raw_type: object = field(default=None, compare=False, repr=False)
    raw_field: object = field(default=None, compare=False, repr=False)

    @property
    def key(self):
        """Return the ``(type_name, field_name)`` pair addressed by this event."""
        return (self.type_name, self.field_name)


class HitEventBus:
    """Synchronous publish/subscribe channel scoped to one instrumented schema.

    Handlers are registered during setup and called in subscription order.
    Exceptions raised by a handler propagate to whoever emitted the event.
    """

    def __init__(self):
        """Initialize an empty handler table for every event kind."""
        self._handlers = {kind: [] for kind in EVENT_KINDS}

    def subscribe(self, kind, handler):
        """Register ``handler`` to receive every event of ``kind``.

        Raises:
            ValueError: If ``kind`` is not a known event kind.
        """
        if kind not in self._handlers:
            raise ValueError(f"Unknown event kind: {kind!r}")
        self._handlers[kind].append(handler)

    def emit(self, event):
        """Deliver ``event`` to the handlers subscribed to its kind."""
        for handler in tuple(self._handlers[event.kind]):
            handler(event)
