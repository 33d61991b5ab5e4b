"""Django urlpatterns for graphene_django_hit_map.

Mount the patterns in your root URL conf to expose the hit map and a
Prometheus-compatible scrape endpoint::

    from django.urls import include, path

    urlpatterns = [
        ...
        path("graphql-hit-map/", include("graphene_django_hit_map.urls")),
    ]

The hit map is then available at ``/graphql-hit-map/hits/`` and metrics at
``/graphql-hit-map/metrics/``.
"""

from django.urls import path

from graphene_django_hit_map.views import hit_map_view, metrics_view

app_name = "graphene_django_hit_map"

urlpatterns = [
    path("hits/", hit_map_view, name="hits"),
    path("metrics/", metrics_view, name="metrics"),
]
