"""Pipeline metrics emitted through logging, with optional Prometheus export."""

from __future__ import annotations

import logging
import re
import time
from contextlib import contextmanager
from typing import Any, Iterator, Tuple

try:  # pragma: no cover - optional dependency
    from prometheus_client import (
        CONTENT_TYPE_LATEST,
        CollectorRegistry,
        Counter as PromCounter,
        Gauge as PromGauge,
        Histogram as PromHistogram,
        generate_latest,
    )

    _PROMETHEUS_AVAILABLE = True
except Exception:  # pragma: no cover - dependency missing
    CollectorRegistry = None  # type: ignore[assignment]
    PromCounter = PromGauge = PromHistogram = None  # type: ignore[assignment]
    generate_latest = None  # type: ignore[assignment]
    CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"
    _PROMETHEUS_AVAILABLE = False

DEFAULT_NAMESPACE = "keywordlens"

_PROM_NAME_RE = re.compile(r"[^a-zA-Z0-9_]")

_PROM_KINDS = {
    "counter": ("counter", "inc"),
    "gauge": ("gauge", "set"),
    "histogram": ("duration", "observe"),
}


class MetricsRecorder:
    """Record pipeline counters, gauges and timings.

    Every metric is written as one log line on ``keywordlens.metrics`` in the
    form ``<namespace>.<metric> key=value ...``. When Prometheus export is
    enabled (and ``prometheus_client`` is importable) the same values also feed
    a private registry that :meth:`render_prometheus` serialises.
    """

    def __init__(
        self,
        *,
        enabled: bool = True,
        namespace: str = DEFAULT_NAMESPACE,
        logger: logging.Logger | None = None,
        prometheus_enabled: bool = False,
        registry: Any | None = None,
    ) -> None:
        self._enabled = enabled
        self._namespace = namespace.strip() or DEFAULT_NAMESPACE
        self._logger = logger or logging.getLogger("keywordlens.metrics")
        self._prometheus_enabled = bool(prometheus_enabled and _PROMETHEUS_AVAILABLE)
        if registry is None and self._prometheus_enabled:
            registry = CollectorRegistry()
        self._prom_registry = registry if self._prometheus_enabled else None
        self._prom_metrics: dict[Tuple[str, str, Tuple[str, ...]], Any] = {}

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def prometheus_enabled(self) -> bool:
        return self._prometheus_enabled and self._prom_registry is not None

    @property
    def prometheus_registry(self) -> Any | None:
        return self._prom_registry

    @property
    def prometheus_content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def render_prometheus(self) -> bytes:
        if not self.prometheus_enabled:
            raise RuntimeError("Prometheus export is disabled")
        return generate_latest(self._prom_registry)

    def increment(self, metric: str, *, value: int = 1, **tags: Any) -> None:
        """Increment a counter metric."""

        if not self._enabled:
            return
        value = int(value)
        clean_tags = _clean(tags)
        self._emit(metric, fields={"value": value}, tags=clean_tags)
        self._prom_update("counter", metric, float(max(value, 0)), clean_tags)

    def set_gauge(self, metric: str, value: float, **tags: Any) -> None:
        if not self._enabled:
            return
        clean_tags = _clean(tags)
        self._emit(metric, fields={"value": value}, tags=clean_tags)
        self._prom_update("gauge", metric, float(value), clean_tags)

    def record_timing(self, metric: str, duration_seconds: float, **tags: Any) -> None:
        """Record a duration; logs carry milliseconds, Prometheus gets seconds."""

        if not self._enabled:
            return
        duration_seconds = max(duration_seconds, 0.0)
        clean_tags = _clean(tags)
        self._emit(metric, fields={"duration_ms": round(duration_seconds * 1000.0, 4)}, tags=clean_tags)
        self._prom_update("histogram", metric, duration_seconds, clean_tags)

    @contextmanager
    def track_timing(self, metric: str, **tags: Any) -> Iterator[None]:
        if not self._enabled:
            yield
            return
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record_timing(metric, time.perf_counter() - start, **tags)

    def _emit(self, metric: str, *, fields: dict[str, Any], tags: dict[str, Any]) -> None:
        segments = [f"{key}={_stringify(value)}" for key, value in sorted(fields.items())]
        segments.extend(f"{key}={_stringify(value)}" for key, value in sorted(tags.items()))
        message = f"{self._namespace}.{metric}"
        if segments:
            message = f"{message} {' '.join(segments)}"
        self._logger.info(message)

    def _prom_update(self, kind: str, metric: str, value: float, tags: dict[str, Any]) -> None:
        if not self.prometheus_enabled:
            return
        label_keys = tuple(sorted(tags))
        label_names = tuple(_sanitize_label(key) for key in label_keys)
        cache_key = (kind, metric, label_names)
        collector = self._prom_metrics.get(cache_key)
        if collector is None:
            factory = {"counter": PromCounter, "gauge": PromGauge, "histogram": PromHistogram}[kind]
            description, _ = _PROM_KINDS[kind]
            collector = factory(
                self._prom_metric_name(metric),
                f"{metric} {description}",
                labelnames=list(label_names),
                registry=self._prom_registry,
            )
            self._prom_metrics[cache_key] = collector
        target = collector
        if label_names:
            target = collector.labels(
                **{name: _stringify(tags[key]) for name, key in zip(label_names, label_keys)}
            )
        getattr(target, _PROM_KINDS[kind][1])(value)

    def _prom_metric_name(self, metric: str) -> str:
        cleaned = _PROM_NAME_RE.sub("_", metric)
        return f"{_PROM_NAME_RE.sub('_', self._namespace)}_{cleaned}".strip("_")


def _clean(tags: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in tags.items() if value is not None}


def _sanitize_label(label: str) -> str:
    return _PROM_NAME_RE.sub("_", label) or "label"


def _stringify(value: Any) -> str:
    if isinstance(value, float):
        return f"{int(value)}" if value.is_integer() else f"{value:.4f}"
    return str(value)


__all__ = ["DEFAULT_NAMESPACE", "MetricsRecorder"]
