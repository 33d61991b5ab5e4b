"""Exceptions raised while setting up schema instrumentation."""


class HitMapError(Exception):
    """Base class for hit map setup errors."""


class SchemaWalkError(HitMapError):
    """The schema's type map or a type's fields could not be enumerated."""


class HitMapConfigurationError(HitMapError):
    """A supplied hit store or setting does not satisfy the required contract."""
