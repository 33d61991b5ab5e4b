"""Views for graphene_django_hit_map."""

from django.apps import apps
from django.http import HttpRequest, HttpResponse, JsonResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest


async def hit_map_view(request: HttpRequest) -> HttpResponse:
    """Return the current hit map as ``{type_name: {field_name: count}}`` JSON.

    Returns:
        JsonResponse: The snapshot, or a 503 error when instrumentation is disabled.
    """
    read_snapshot = apps.get_app_config("graphene_django_hit_map").read_snapshot
    if read_snapshot is None:
        return JsonResponse({"error": "GraphQL hit map is not enabled"}, status=503)
    return JsonResponse(await read_snapshot())


def metrics_view(request: HttpRequest) -> HttpResponse:
    """Expose Prometheus metrics in the standard text exposition format.

    Field counts appear here when ``export_prometheus`` is enabled.

    Returns:
        HttpResponse: Prometheus metrics in text format.
    """
    return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
