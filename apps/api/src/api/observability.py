from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Protocol

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

PLAN_OUTCOMES = ("planned", "no_route", "no_candidates", "quota_exceeded")


@dataclass(frozen=True)
class PlanOutcomeMetric:
    outcome: str
    duration_ms: float
    safe_spot_count: int


class PlanMetricCollector(Protocol):
    def observe(self, metric: PlanOutcomeMetric) -> None: ...


class InMemoryPlanMetricsCollector(PlanMetricCollector):
    def __init__(self) -> None:
        self._metrics: list[PlanOutcomeMetric] = []

    def observe(self, metric: PlanOutcomeMetric) -> None:
        self._metrics.append(metric)

    def snapshot(self) -> list[dict]:
        return [asdict(item) for item in self._metrics]


class PrometheusPlanMetricsCollector(PlanMetricCollector):
    def __init__(self) -> None:
        self._registry = CollectorRegistry()
        self._plan_counter = Counter(
            "evacuation_plans_total",
            "Evacuation plans by outcome",
            labelnames=("outcome",),
            registry=self._registry,
        )
        self._latency_histogram = Histogram(
            "evacuation_plan_duration_ms",
            "Evacuation plan latency in milliseconds",
            labelnames=("outcome",),
            buckets=(50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000),
            registry=self._registry,
        )

    def observe(self, metric: PlanOutcomeMetric) -> None:
        self._plan_counter.labels(metric.outcome).inc()
        self._latency_histogram.labels(metric.outcome).observe(metric.duration_ms)

    def render(self) -> str:
        return generate_latest(self._registry).decode("utf-8")


class CompositePlanMetricsCollector(PlanMetricCollector):
    def __init__(self, collectors: list[PlanMetricCollector]) -> None:
        self._collectors = collectors

    def observe(self, metric: PlanOutcomeMetric) -> None:
        for collector in self._collectors:
            collector.observe(metric)
