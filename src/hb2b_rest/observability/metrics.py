"""Metrics collection for deliveries and notifications.

Keeps thread-safe, in-process counters and histograms that can be exported
in Prometheus text format by the host application.

Supported metric types:
- Counter: Monotonically increasing values (e.g., total deliveries)
- Histogram: Distribution of values with configurable buckets (e.g., latency)

Example:
    >>> from hb2b_rest.observability.metrics import get_metrics
    >>> metrics = get_metrics()
    >>> labels = {"kind": "user_message", "status": "success"}
    >>> metrics.increment_counter("hb2b_deliveries_total", labels)
    >>> metrics.observe_histogram("hb2b_delivery_duration_seconds", 0.125, {"kind": "user_message"})
    >>> print(metrics.export_prometheus())
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import ClassVar

LabelKey = tuple[tuple[str, str], ...]


def _label_key(labels: dict[str, str] | None) -> LabelKey:
    return tuple(sorted((labels or {}).items()))


@dataclass
class Counter:
    """A monotonically increasing counter metric."""

    name: str
    help_text: str
    values: dict[LabelKey, float] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def increment(self, labels: dict[str, str] | None = None, value: float = 1.0) -> None:
        label_key = _label_key(labels)
        with self._lock:
            self.values[label_key] = self.values.get(label_key, 0.0) + value

    def get(self, labels: dict[str, str] | None = None) -> float:
        with self._lock:
            return self.values.get(_label_key(labels), 0.0)


# Default histogram buckets for latency (in seconds), up to the default timeout
DEFAULT_LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


@dataclass
class _HistogramData:
    buckets: dict[float, float]
    sum: float = 0.0
    count: float = 0.0


@dataclass
class Histogram:
    """A histogram metric for measuring distributions."""

    name: str
    help_text: str
    buckets: tuple[float, ...] = DEFAULT_LATENCY_BUCKETS
    values: dict[LabelKey, _HistogramData] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def observe(self, value: float, labels: dict[str, str] | None = None) -> None:
        label_key = _label_key(labels)
        with self._lock:
            data = self.values.get(label_key)
            if data is None:
                data = _HistogramData(buckets=dict.fromkeys(self.buckets, 0.0))
                self.values[label_key] = data
            # Per-bucket counts; made cumulative on export
            for bound in self.buckets:
                if value <= bound:
                    data.buckets[bound] += 1.0
                    break
            data.sum += value
            data.count += 1.0

    def get_count(self, labels: dict[str, str] | None = None) -> float:
        with self._lock:
            data = self.values.get(_label_key(labels))
            return data.count if data is not None else 0.0


class MetricsCollector:
    """Collects and exports metrics in Prometheus format.

    Only registered metrics are recorded; updates of unknown metric names are
    ignored.
    """

    DEFAULT_COUNTERS: ClassVar[dict[str, str]] = {
        "hb2b_deliveries_total": "Total number of deliveries and notifications to the back-end",
        "hb2b_delivery_errors_total": "Total number of failed deliveries and notifications",
        "hb2b_submissions_total": "Total number of submissions parsed from HTTP headers",
    }

    DEFAULT_HISTOGRAMS: ClassVar[dict[str, str]] = {
        "hb2b_delivery_duration_seconds": "Duration of the HTTP exchange with the back-end",
    }

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, Counter] = {
            name: Counter(name=name, help_text=help_text)
            for name, help_text in self.DEFAULT_COUNTERS.items()
        }
        self._histograms: dict[str, Histogram] = {
            name: Histogram(name=name, help_text=help_text)
            for name, help_text in self.DEFAULT_HISTOGRAMS.items()
        }

    def register_counter(self, name: str, help_text: str) -> None:
        with self._lock:
            if name not in self._counters:
                self._counters[name] = Counter(name=name, help_text=help_text)

    def register_histogram(
        self, name: str, help_text: str, buckets: tuple[float, ...] = DEFAULT_LATENCY_BUCKETS
    ) -> None:
        with self._lock:
            if name not in self._histograms:
                self._histograms[name] = Histogram(name=name, help_text=help_text, buckets=buckets)

    def increment_counter(
        self, name: str, labels: dict[str, str] | None = None, value: float = 1.0
    ) -> None:
        with self._lock:
            counter = self._counters.get(name)
        if counter is not None:
            counter.increment(labels, value)

    def observe_histogram(
        self, name: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        with self._lock:
            histogram = self._histograms.get(name)
        if histogram is not None:
            histogram.observe(value, labels)

    def get_counter(self, name: str, labels: dict[str, str] | None = None) -> float:
        with self._lock:
            counter = self._counters.get(name)
        return counter.get(labels) if counter is not None else 0.0

    def get_histogram_count(self, name: str, labels: dict[str, str] | None = None) -> float:
        with self._lock:
            histogram = self._histograms.get(name)
        return histogram.get_count(labels) if histogram is not None else 0.0

    @staticmethod
    def _format_labels(labels: LabelKey, extra: str | None = None) -> str:
        def escape_label_value(value: str) -> str:
            """Escape label value per Prometheus specification."""
            value = value.replace("\\", "\\\\")
            return value.replace('"', '\\"')

        parts = [f'{k}="{escape_label_value(v)}"' for k, v in labels]
        if extra:
            parts.append(extra)
        return "{" + ",".join(parts) + "}" if parts else ""

    def export_prometheus(self) -> str:
        """Export all metrics in Prometheus text format."""
        lines: list[str] = []

        with self._lock:
            counters = list(self._counters.values())
            histograms = list(self._histograms.values())

        for counter in counters:
            lines.append(f"# HELP {counter.name} {counter.help_text}")
            lines.append(f"# TYPE {counter.name} counter")
            with counter._lock:
                values = dict(counter.values)
            if not values:
                lines.append(f"{counter.name} 0")
            for label_key, value in values.items():
                lines.append(f"{counter.name}{self._format_labels(label_key)} {value}")

        for histogram in histograms:
            lines.append(f"# HELP {histogram.name} {histogram.help_text}")
            lines.append(f"# TYPE {histogram.name} histogram")
            with histogram._lock:
                items = [
                    (key, dict(data.buckets), data.sum, data.count)
                    for key, data in histogram.values.items()
                ]
            if not items:
                items = [((), dict.fromkeys(histogram.buckets, 0.0), 0.0, 0.0)]
            for label_key, buckets, total, count in items:
                cumulative = 0.0
                for bound in histogram.buckets:
                    cumulative += buckets.get(bound, 0.0)
                    label_str = self._format_labels(label_key, f'le="{bound}"')
                    lines.append(f"{histogram.name}_bucket{label_str} {cumulative}")
                label_str = self._format_labels(label_key, 'le="+Inf"')
                lines.append(f"{histogram.name}_bucket{label_str} {count}")
                base_labels = self._format_labels(label_key)
                lines.append(f"{histogram.name}_sum{base_labels} {total}")
                lines.append(f"{histogram.name}_count{base_labels} {count}")

        return "\n".join(lines) + "\n"

    def reset(self) -> None:
        """Reset all metrics to zero. Useful for testing."""
        with self._lock:
            for counter in self._counters.values():
                with counter._lock:
                    counter.values.clear()
            for histogram in self._histograms.values():
                with histogram._lock:
                    histogram.values.clear()


# Global metrics collector instance
_metrics_collector: MetricsCollector | None = None
_collector_lock = threading.Lock()


def get_metrics() -> MetricsCollector:
    """Get the global metrics collector instance."""
    global _metrics_collector
    with _collector_lock:
        if _metrics_collector is None:
            _metrics_collector = MetricsCollector()
        return _metrics_collector


def reset_metrics() -> None:
    """Reset the global metrics collector. Useful for testing."""
    with _collector_lock:
        if _metrics_collector is not None:
            _metrics_collector.reset()
