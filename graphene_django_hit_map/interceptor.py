"""Resolver interceptors that record a hit before delegating to the original."""

import functools

from graphene_django_hit_map.events import HIT, FieldEvent
from graphene_django_hit_map.log import log_bookkeeping_error

HIT_ERROR_MESSAGE = "Error while emitting hit event"

# Attribute holding the {schema: recorder} table of a hit resolver.
HIT_ROUTES_ATTR = "hit_routes"


def _select_route(routes, args):
    """Pick the recorder of the schema executing the resolver.

    Resolvers are called as ``(source, info, **args)``; ``info.schema`` names
    the executing schema. Falls back to the first route when the schema is
    unknown.
    """
    if len(routes) > 1 and len(args) > 1:
        route = routes.get(getattr(args[1], "schema", None))
        if route is not None:
            return route
    return next(iter(routes.values()))


class HitInterceptorFactory:  # pylint: disable=too-few-public-methods
    """Build counting wrappers around field resolvers.

    Each wrapper emits a ``hit`` event on ``events`` and then returns whatever
    the original resolver returns. The result is forwarded as-is: awaitables,
    async iterators and plain values alike, so the wrapper behaves the same
    under synchronous and asynchronous execution. Errors raised by the
    original resolver are not caught.

    A field shared by several instrumented schemas keeps a single wrapper:
    passing an existing hit resolver back in adds a route for ``schema``
    instead of wrapping it again.

    Args:
        events (HitEventBus): Bus the ``hit`` events are emitted on.
        error_sink (callable): Called with ``(error, message)`` when emitting
            a hit fails. Defaults to logging on the package logger.
        schema (GraphQLSchema): Schema whose executions are routed to ``events``.
    """

    def __init__(self, events, error_sink=None, schema=None):
        """Initialize the factory for one instrumented schema."""
        self.events = events
        self.error_sink = error_sink or log_bookkeeping_error
        self.schema = schema

    def _make_recorder(self, event):
        emit = self.events.emit
        error_sink = self.error_sink

        def record():
            try:
                emit(event)
            except Exception as error:  # pylint: disable=broad-except
                error_sink(error, HIT_ERROR_MESSAGE)

        return record

    def __call__(self, original, type_name, field_name, raw_type=None, raw_field=None):
        """Return a resolver that counts a hit on ``type_name.field_name`` and calls ``original``."""
        record = self._make_recorder(FieldEvent(HIT, type_name, field_name, raw_type, raw_field))

        routes = getattr(original, HIT_ROUTES_ATTR, None)
        if isinstance(routes, dict):
            routes[self.schema] = record
            return original

        routes = {self.schema: record}

        @functools.wraps(original)
        def hit_resolver(*args, **kwargs):
            _select_route(routes, args)()
            return original(*args, **kwargs)

        setattr(hit_resolver, HIT_ROUTES_ATTR, routes)
        return hit_resolver
