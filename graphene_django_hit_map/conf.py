"""Settings resolution for graphene_django_hit_map."""

from graphene_django_hit_map.exceptions import HitMapConfigurationError

_DEFAULT_SETTINGS = {
    "hit_map_enabled": True,
    "schema": None,
    "store": None,
    "export_prometheus": False,
}


def get_app_settings():
    """Load hit map settings from ``settings.GRAPHENE_HIT_MAP``.

    Falls back to built-in defaults for any key not present in the dict.

    Returns:
        dict: Resolved settings merged with defaults.
    """
    from django.conf import settings  # pylint: disable=import-outside-toplevel

    user_config = getattr(settings, "GRAPHENE_HIT_MAP", {})
    return {**_DEFAULT_SETTINGS, **user_config}


def _load(value, setting):
    """Import ``value`` when it is a dotted path, otherwise return it unchanged."""
    from django.utils.module_loading import import_string  # pylint: disable=import-outside-toplevel

    if not isinstance(value, str):
        return value
    try:
        return import_string(value)
    except ImportError as error:
        raise HitMapConfigurationError(f"Could not import {setting} {value!r}: {error}") from error


def resolve_schema(config):
    """Return the schema to instrument.

    Uses the ``schema`` key when set, otherwise Graphene's ``GRAPHENE["SCHEMA"]``.

    Returns:
        The schema object, or None when neither setting names one.
    """
    if config.get("schema"):
        return _load(config["schema"], "schema")

    from graphene_django.settings import graphene_settings  # pylint: disable=import-outside-toplevel

    return graphene_settings.SCHEMA


def resolve_store_factory(config):
    """Return the store factory named by the ``store`` / ``export_prometheus`` keys."""
    from graphene_django_hit_map.stores import (  # pylint: disable=import-outside-toplevel
        MemoryHitStore,
        PrometheusHitStore,
    )

    if config.get("store"):
        factory = _load(config["store"], "store")
        if not callable(factory):
            raise HitMapConfigurationError(f"Hit store factory {config['store']!r} is not callable")
        return factory
    if config.get("export_prometheus", False):
        return PrometheusHitStore
    return MemoryHitStore
