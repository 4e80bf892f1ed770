"""Prometheus instrumentation for the relay."""

from __future__ import annotations

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge


class RelayMetrics:
    """Session gauges plus relayed/rejected event counters.

    Each app gets its own registry so several apps can live in one process
    (the test suite builds one per test).
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self.active_sessions = Gauge(
            "showrelay_active_sessions",
            "Sessions currently hosted",
            registry=self.registry,
        )
        self.active_players = Gauge(
            "showrelay_active_players",
            "Players joined across all sessions",
            registry=self.registry,
        )
        self.events_relayed = Counter(
            "showrelay_events_relayed_total",
            "Client events accepted and forwarded",
            ["event"],
            registry=self.registry,
        )
        self.events_rejected = Counter(
            "showrelay_events_rejected_total",
            "Client events dropped for lacking the required role",
            ["event"],
            registry=self.registry,
        )

    def relayed(self, event: str) -> None:
        self.events_relayed.labels(event=event).inc()

    def rejected(self, event: str) -> None:
        self.events_rejected.labels(event=event).inc()
