"""Diagnostic logging for the hit map bookkeeping path."""

import logging

LOGGER_NAME = "graphene_django_hit_map"
_LOGGER_CONFIGURED = False


def get_logger():
    """Return the package logger, ensuring it has a handler.

    Deferred setup avoids being overwritten by Django's ``dictConfig``
    which runs during ``django.setup()``.
    """
    global _LOGGER_CONFIGURED  # noqa: PLW0603  # pylint: disable=global-statement
    log = logging.getLogger(LOGGER_NAME)
    if not _LOGGER_CONFIGURED:
        _LOGGER_CONFIGURED = True
        if not log.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s.%(msecs)03d %(levelname)-7s %(name)s : %(message)s",
                    datefmt="%H:%M:%S",
                )
            )
            log.addHandler(handler)
        log.setLevel(logging.INFO)
        log.propagate = False
    return log


def log_bookkeeping_error(error, message):
    """Default diagnostic sink: log ``message`` with the traceback of ``error``."""
    get_logger().error(message, exc_info=error)
