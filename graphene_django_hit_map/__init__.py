"""App declaration for graphene_django_hit_map."""

from importlib import metadata

from django.apps import AppConfig

from graphene_django_hit_map.instrumentation import instrument

__version__ = metadata.version(__name__)

__all__ = ["instrument", "GrapheneDjangoHitMapConfig"]


class GrapheneDjangoHitMapConfig(AppConfig):
    """Django AppConfig for graphene_django_hit_map.

    Add this app to ``INSTALLED_APPS`` in your ``settings.py``; the schema
    named by ``GRAPHENE["SCHEMA"]`` is instrumented once when Django starts::

        INSTALLED_APPS = [
            ...
            "graphene_django_hit_map",
        ]

    Configure the library via ``GRAPHENE_HIT_MAP`` in ``settings.py``::

        GRAPHENE_HIT_MAP = {
            "hit_map_enabled": True,
            # Instrument another schema than GRAPHENE["SCHEMA"]:
            "schema": None,
            # Dotted path to a store factory called with the event bus:
            "store": None,
            # Mirror counts into the graphql_field_hits_total Prometheus counter:
            "export_prometheus": False,
        }

    The counts are then available through ``read_snapshot`` on this config,
    or over HTTP with ``graphene_django_hit_map.urls``.
    """

    name = "graphene_django_hit_map"
    verbose_name = "GraphQL Hit Map"
    default_auto_field = "django.db.models.BigAutoField"

    read_snapshot = None

    def ready(self):
        """Instrument the configured schema.

        Setup errors (unloadable schema or store, malformed schema) propagate
        and abort startup rather than leaving a half-instrumented schema.
        """
        from graphene_django_hit_map.conf import (  # pylint: disable=import-outside-toplevel
            get_app_settings,
            resolve_schema,
            resolve_store_factory,
        )
        from graphene_django_hit_map.log import get_logger  # pylint: disable=import-outside-toplevel

        config = get_app_settings()
        if not config.get("hit_map_enabled", True):
            return

        schema = resolve_schema(config)
        if schema is None:
            get_logger().warning("No GraphQL schema configured, hit map disabled")
            return

        self.read_snapshot = instrument(schema, store_factory=resolve_store_factory(config))


config = GrapheneDjangoHitMapConfig  # pylint: disable=invalid-name
