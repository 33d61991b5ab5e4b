"""Tests for the in-memory and Prometheus hit stores."""

from concurrent.futures import ThreadPoolExecutor

from asgiref.sync import async_to_sync
from django.test import TestCase
from prometheus_client import CollectorRegistry, Counter

from graphene_django_hit_map.events import DISCOVERED, HIT, FieldEvent, HitEventBus
from graphene_django_hit_map.stores import BaseHitStore, MemoryHitStore, PrometheusHitStore


def _snapshot(store):
    return async_to_sync(store.read_snapshot)()


class MemoryHitStoreTest(TestCase):
    """Test cases for MemoryHitStore."""

    def setUp(self):
        self.events = HitEventBus()
        self.store = MemoryHitStore(self.events)

    def test_discovered_field_starts_at_zero(self):
        self.events.emit(FieldEvent(DISCOVERED, "Query", "devices"))

        self.assertEqual(_snapshot(self.store), {"Query": {"devices": 0}})

    def test_hit_increments_counter(self):
        self.events.emit(FieldEvent(DISCOVERED, "Query", "devices"))
        self.events.emit(FieldEvent(HIT, "Query", "devices"))
        self.events.emit(FieldEvent(HIT, "Query", "devices"))

        self.assertEqual(_snapshot(self.store), {"Query": {"devices": 2}})

    def test_rediscovery_does_not_reset_counter(self):
        self.store.on_discovered("Query", "devices")
        self.store.on_hit("Query", "devices")
        self.store.on_discovered("Query", "devices")

        self.assertEqual(_snapshot(self.store), {"Query": {"devices": 1}})

    def test_hit_on_undiscovered_field_starts_at_one(self):
        self.store.on_hit("Device", "name")

        self.assertEqual(_snapshot(self.store), {"Device": {"name": 1}})

    def test_same_field_name_on_different_types_is_distinct(self):
        self.store.on_discovered("Device", "name")
        self.store.on_discovered("Location", "name")
        self.store.on_hit("Device", "name")

        self.assertEqual(_snapshot(self.store), {"Device": {"name": 1}, "Location": {"name": 0}})

    def test_snapshot_is_independent_copy(self):
        self.store.on_discovered("Query", "devices")
        snapshot = _snapshot(self.store)

        snapshot["Query"]["devices"] = 42
        self.store.on_hit("Query", "devices")

        self.assertEqual(snapshot["Query"]["devices"], 42)
        self.assertEqual(_snapshot(self.store), {"Query": {"devices": 1}})

    def test_snapshot_preserves_discovery_order(self):
        for type_name, field_name in (("Query", "b"), ("Query", "a"), ("Device", "z")):
            self.store.on_discovered(type_name, field_name)

        snapshot = _snapshot(self.store)

        self.assertEqual(list(snapshot), ["Query", "Device"])
        self.assertEqual(list(snapshot["Query"]), ["b", "a"])

    def test_concurrent_hits_are_not_lost(self):
        self.store.on_discovered("Query", "devices")

        def hammer(_):
            for _ in range(1000):
                self.events.emit(FieldEvent(HIT, "Query", "devices"))

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(hammer, range(8)))

        self.assertEqual(_snapshot(self.store), {"Query": {"devices": 8000}})

    def test_incomplete_store_cannot_be_instantiated(self):
        class NoSnapshotStore(BaseHitStore):  # pylint: disable=abstract-method
            def on_discovered(self, type_name, field_name):
                pass

            def on_hit(self, type_name, field_name):
                pass

        with self.assertRaises(TypeError):
            NoSnapshotStore(self.events)  # pylint: disable=abstract-class-instantiated


class PrometheusHitStoreTest(TestCase):
    """Test cases for PrometheusHitStore."""

    def setUp(self):
        self.counter = Counter(
            "test_field_hits_total",
            "Field hits recorded by the test store",
            ["type_name", "field_name"],
            registry=CollectorRegistry(),
        )
        self.events = HitEventBus()
        self.store = PrometheusHitStore(self.events, counter=self.counter)

    def _value(self, type_name, field_name):
        return self.counter.labels(type_name=type_name, field_name=field_name)._value.get()

    def test_discovered_field_exported_at_zero(self):
        self.events.emit(FieldEvent(DISCOVERED, "Device", "serial"))

        samples = [
            sample.labels for metric in self.counter.collect() for sample in metric.samples
            if sample.name == "test_field_hits_total"
        ]
        self.assertIn({"type_name": "Device", "field_name": "serial"}, samples)
        self.assertEqual(self._value("Device", "serial"), 0)

    def test_hits_mirrored_into_counter_and_snapshot(self):
        self.events.emit(FieldEvent(DISCOVERED, "Device", "name"))
        self.events.emit(FieldEvent(HIT, "Device", "name"))
        self.events.emit(FieldEvent(HIT, "Device", "name"))

        self.assertEqual(self._value("Device", "name"), 2)
        self.assertEqual(_snapshot(self.store), {"Device": {"name": 2}})

    def test_separate_counters_keep_schemas_apart(self):
        other_counter = Counter(
            "other_field_hits_total",
            "Field hits recorded by a second schema",
            ["type_name", "field_name"],
            registry=CollectorRegistry(),
        )
        other_events = HitEventBus()
        PrometheusHitStore(other_events, counter=other_counter)

        other_events.emit(FieldEvent(HIT, "Device", "name"))

        self.assertEqual(other_counter.labels(type_name="Device", field_name="name")._value.get(), 1)
        self.assertEqual(self._value("Device", "name"), 0)
