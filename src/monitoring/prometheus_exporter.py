from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    generate_latest,
)

from core.logging import get_logger

logger = get_logger("monitoring.prometheus_exporter")

# Registry privato: non si mescola con il registry di default del processo.
_REGISTRY = CollectorRegistry()

AGGREGATIONS_TOTAL = Counter(
    "detail_aggregations_total",
    "Aggregazioni concluse per operazione ed esito",
    ["operation", "outcome"],
    registry=_REGISTRY,
)
OPTIONAL_BRANCH_FAILURES_TOTAL = Counter(
    "detail_optional_branch_failures_total",
    "Rami opzionali falliti e sostituiti con un risultato vuoto",
    ["operation", "branch"],
    registry=_REGISTRY,
)


def record_aggregation(operation: str, outcome: str) -> None:
    AGGREGATIONS_TOTAL.labels(operation=operation, outcome=outcome).inc()


def record_branch_failure(operation: str, branch: str) -> None:
    OPTIONAL_BRANCH_FAILURES_TOTAL.labels(operation=operation, branch=branch).inc()


def generate_prometheus_text() -> bytes:
    return generate_latest(_REGISTRY)


__all__ = [
    "record_aggregation",
    "record_branch_failure",
    "generate_prometheus_text",
    "_REGISTRY",
]
