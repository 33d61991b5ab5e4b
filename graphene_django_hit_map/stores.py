"""Hit stores: the counting tables fed by the instrumentation event bus."""

import abc
import threading

from graphene_django_hit_map.events import DISCOVERED, HIT
from graphene_django_hit_map.metrics import graphql_field_hits_total


class BaseHitStore(abc.ABC):
    """Contract every hit store satisfies.

    A store is built from the event bus of one instrumented schema and
    subscribes itself to ``discovered`` and ``hit`` events. Only the store's
    own methods mutate its table; everything else reads snapshots.

    Subclasses backed by a remote or batching service may suspend in
    :meth:`read_snapshot`; the in-memory store never does.
    """

    def __init__(self, events):
        """Subscribe the store to the ``discovered`` and ``hit`` events of ``events``."""
        self.events = events
        events.subscribe(DISCOVERED, self._handle_discovered)
        events.subscribe(HIT, self._handle_hit)

    def _handle_discovered(self, event):
        self.on_discovered(event.type_name, event.field_name)

    def _handle_hit(self, event):
        self.on_hit(event.type_name, event.field_name)

    @abc.abstractmethod
    def on_discovered(self, type_name: str, field_name: str) -> None:
        """Ensure a counter exists for the field without resetting an existing one."""

    @abc.abstractmethod
    def on_hit(self, type_name: str, field_name: str) -> None:
        """Record one resolution attempt of the field."""

    @abc.abstractmethod
    async def read_snapshot(self) -> dict:
        """Return an independent ``{type_name: {field_name: count}}`` copy."""


class MemoryHitStore(BaseHitStore):
    """Process-local store keeping counts in nested dicts behind a lock.

    Types and fields keep their discovery order, so snapshots follow the
    order of the schema's type map.
    """

    def __init__(self, events):
        """Initialize an empty table and subscribe to ``events``."""
        self._lock = threading.Lock()
        self._table = {}
        super().__init__(events)

    def on_discovered(self, type_name, field_name):
        with self._lock:
            self._table.setdefault(type_name, {}).setdefault(field_name, 0)

    def on_hit(self, type_name, field_name):
        # An undiscovered key starts at one rather than failing.
        with self._lock:
            fields = self._table.setdefault(type_name, {})
            fields[field_name] = fields.get(field_name, 0) + 1

    async def read_snapshot(self):
        with self._lock:
            return {type_name: dict(fields) for type_name, fields in self._table.items()}


class PrometheusHitStore(MemoryHitStore):
    """In-memory store that also exports every count to Prometheus.

    Discovered fields get a zero-valued ``graphql_field_hits_total`` series so
    unused fields show up in a scrape, not only the ones that were resolved.

    The default counter is process-wide and not labelled by schema: two
    schemas exported through it add up their counts for the same
    ``(type_name, field_name)``. Pass a separate ``counter`` (for example with
    ``functools.partial``) to keep them apart; the snapshot is always per store.
    """

    def __init__(self, events, counter=graphql_field_hits_total):
        """Initialize the store, mirroring counts into ``counter``."""
        self.counter = counter
        super().__init__(events)

    def on_discovered(self, type_name, field_name):
        super().on_discovered(type_name, field_name)
        self.counter.labels(type_name=type_name, field_name=field_name)

    def on_hit(self, type_name, field_name):
        super().on_hit(type_name, field_name)
        self.counter.labels(type_name=type_name, field_name=field_name).inc()
