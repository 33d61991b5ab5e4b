"""Prometheus metric definitions for GraphQL field hit counting."""

from prometheus_client import Counter

graphql_field_hits_total = Counter(
    "graphql_field_hits_total",
    "Total number of GraphQL field resolutions, per type and field",
    ["type_name", "field_name"],
)
