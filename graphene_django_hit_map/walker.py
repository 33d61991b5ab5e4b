"""Schema walker installing hit interceptors on every instrumentable field."""

from weakref import WeakSet

from graphql import GraphQLObjectType, default_field_resolver

from graphene_django_hit_map.events import DISCOVERED, FieldEvent
from graphene_django_hit_map.exceptions import SchemaWalkError

# id(field) -> _WrappedField. GraphQLField defines __eq__ and is unhashable.
_WRAPPED_FIELDS = {}


class _WrappedField:  # pylint: disable=too-few-public-methods
    """Marker for a field whose resolver has been replaced by an interceptor."""

    def __init__(self, field, key):
        self.field = field
        self.key = key
        self.schemas = WeakSet()


def is_system_type(type_):
    """Return True for built-in introspection types (``__Schema``, ``__Type``, ...).

    A type counts as a system type only when it was not declared by the
    schema author (no AST node) and its name uses the reserved ``__`` prefix.
    """
    return type_.ast_node is None and type_.name.startswith("__")


def wrapped_fields(schema):
    """Return the set of ``(type_name, field_name)`` keys instrumented for ``schema``."""
    return {entry.key for entry in _WRAPPED_FIELDS.values() if schema in entry.schemas}


class SchemaWalker:
    """Walk a schema's type map once and wrap each field's resolver.

    Every object type of the type map is visited directly, so nested types
    are never reached through a field's return type and cycles in the type
    graph need no special handling.

    Fields of the subscription root type are counted on their ``subscribe``
    function, which the engine calls once per established subscription; the
    per-payload ``resolve`` of those fields is left untouched.

    A field object is wrapped at most once. When a type is shared with a
    schema instrumented earlier, its existing interceptor is handed back to
    ``make_interceptor`` so hits from this schema can be routed to this
    schema's store.
    """

    def __init__(self, events):
        """Initialize the walker emitting ``discovered`` events on ``events``."""
        self.events = events

    def instrument(self, schema, make_interceptor):
        """Wrap every field of ``schema`` not yet instrumented for it.

        All interceptors are installed before the ``discovered`` events are
        emitted, so a walk that fails part way leaves neither wrapped
        resolvers nor discovered fields behind.

        Args:
            schema (GraphQLSchema): The schema to instrument in place.
            make_interceptor (callable): Called as
                ``make_interceptor(resolver, type_name, field_name, raw_type, raw_field)``
                and returning the replacement resolver.

        Raises:
            SchemaWalkError: If the type map or the fields of a type cannot be
                enumerated. Nothing is wrapped in that case.
        """
        plan = self._plan(schema)
        installed = []
        try:
            for object_type, field_name, field, attr in plan:
                entry = _WRAPPED_FIELDS.get(id(field))
                if entry is not None and schema in entry.schemas:
                    continue
                current = getattr(field, attr)
                created = entry is None
                if created:
                    entry = _WRAPPED_FIELDS[id(field)] = _WrappedField(field, (object_type.name, field_name))
                    resolver = current or default_field_resolver
                else:
                    resolver = current
                entry.schemas.add(schema)
                installed.append((entry, attr, current, created, object_type))
                setattr(field, attr, make_interceptor(resolver, object_type.name, field_name, object_type, field))

            for entry, _, _, _, object_type in installed:
                type_name, field_name = entry.key
                self.events.emit(FieldEvent(DISCOVERED, type_name, field_name, object_type, entry.field))
        except Exception:
            for entry, attr, current, created, _ in reversed(installed):
                setattr(entry.field, attr, current)
                entry.schemas.discard(schema)
                if created:
                    del _WRAPPED_FIELDS[id(entry.field)]
            raise

    @staticmethod
    def _plan(schema):
        """Enumerate ``(type, field_name, field, attribute)`` for every instrumentable field."""
        try:
            type_map = schema.type_map
            subscription_type = schema.subscription_type
            plan = []
            for type_ in type_map.values():
                if not isinstance(type_, GraphQLObjectType) or is_system_type(type_):
                    continue
                attr = "subscribe" if type_ is subscription_type else "resolve"
                for field_name, field in type_.fields.items():
                    plan.append((type_, field_name, field, attr))
        except Exception as error:
            raise SchemaWalkError(f"Unable to enumerate the schema type map: {error}") from error
        return plan
