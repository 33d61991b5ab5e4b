"""Single entry point wiring the walker, interceptors and hit store to a schema."""

import inspect
from weakref import WeakKeyDictionary

from graphql import GraphQLSchema

from graphene_django_hit_map.events import HitEventBus
from graphene_django_hit_map.exceptions import HitMapConfigurationError
from graphene_django_hit_map.interceptor import HitInterceptorFactory
from graphene_django_hit_map.log import get_logger
from graphene_django_hit_map.stores import MemoryHitStore
from graphene_django_hit_map.walker import SchemaWalker

# Schema -> read accessor of the instrumentation applied to it.
_INSTRUMENTED = WeakKeyDictionary()


def _unwrap_schema(schema):
    """Return the graphql-core schema behind ``schema`` (e.g. a ``graphene.Schema``)."""
    graphql_schema = getattr(schema, "graphql_schema", schema)
    if not isinstance(graphql_schema, GraphQLSchema):
        raise HitMapConfigurationError(f"Expected a GraphQL schema, got {type(schema).__name__}")
    return graphql_schema


def _check_store(store):
    """Fail fast if ``store`` cannot serve snapshots."""
    read_snapshot = getattr(store, "read_snapshot", None)
    if not callable(read_snapshot):
        raise HitMapConfigurationError(
            f"Hit store {type(store).__name__} does not implement a callable read_snapshot()"
        )
    return read_snapshot


def instrument(schema, store_factory=None, error_sink=None):
    """Count every field resolution of ``schema`` and return the snapshot accessor.

    The schema is modified in place: each field resolver is replaced by a
    counting wrapper. Instrumenting the same schema again returns the
    accessor of the first call without wrapping anything twice. Types shared
    with another instrumented schema keep one wrapper per field, and each
    schema's executions are counted in its own store.

    Args:
        schema: A ``graphql.GraphQLSchema`` or an object exposing one as
            ``graphql_schema`` (such as ``graphene.Schema``).
        store_factory (callable): Called with the event bus to build the hit
            store. Defaults to :class:`MemoryHitStore`.
        error_sink (callable): Called with ``(error, message)`` when recording
            a hit fails. Defaults to logging the error.

    Returns:
        coroutine function: Zero-argument accessor returning the current
        ``{type_name: {field_name: count}}`` table.

    Raises:
        HitMapConfigurationError: If the store does not implement ``read_snapshot``.
        SchemaWalkError: If the schema's types cannot be enumerated.
    """
    graphql_schema = _unwrap_schema(schema)
    existing = _INSTRUMENTED.get(graphql_schema)
    if existing is not None:
        get_logger().warning("Schema %r is already instrumented, reusing its hit map", graphql_schema)
        return existing

    events = HitEventBus()
    store = (store_factory or MemoryHitStore)(events)
    store_read_snapshot = _check_store(store)

    SchemaWalker(events).instrument(graphql_schema, HitInterceptorFactory(events, error_sink, graphql_schema))

    async def read_snapshot():
        snapshot = store_read_snapshot()
        if inspect.isawaitable(snapshot):
            snapshot = await snapshot
        return snapshot

    _INSTRUMENTED[graphql_schema] = read_snapshot
    return read_snapshot
