"""Operator counters and a registry to expose them."""

from __future__ import annotations

import threading
from collections.abc import Iterable


class CounterVec:
    """A family of monotonically increasing counters partitioned by labels."""

    def __init__(self, name: str, help: str, label_names: Iterable[str]):
        self.name = name
        self.help = help
        self.label_names = tuple(label_names)
        self._values: dict[tuple[str, ...], float] = {}
        self._lock = threading.Lock()

    def _label_values(self, label) -> tuple[str, ...]:
        values = (label,) if isinstance(label, str) else tuple(label)
        if len(values) != len(self.label_names):
            raise ValueError(
                f"{self.name}: expected {len(self.label_names)} label values, got {len(values)}"
            )
        return values

    def inc(self, label) -> None:
        """Add one to the counter for the given label value(s)."""
        values = self._label_values(label)
        with self._lock:
            self._values[values] = self._values.get(values, 0.0) + 1.0

    def value(self, label) -> float:
        """Current count for the given label value(s); zero if never incremented."""
        values = self._label_values(label)
        with self._lock:
            return self._values.get(values, 0.0)


class Registry:
    """A set of collectors with unique names."""

    def __init__(self):
        self._collectors: dict[str, CounterVec] = {}
        self._lock = threading.Lock()

    def register(self, *args: CounterVec) -> None:
        """Register collectors; a name already present raises ValueError."""
        with self._lock:
            for collector in args:
                if collector.name in self._collectors:
                    raise ValueError(
                        f"duplicate metrics collector registration attempted: {collector.name}"
                    )
                self._collectors[collector.name] = collector

    def __contains__(self, name: object) -> bool:
        return name in self._collectors

    def __getitem__(self, name: str) -> CounterVec:
        return self._collectors[name]

    def __len__(self) -> int:
        return len(self._collectors)


RECONCILE_TOTAL = CounterVec(
    "grpcburner_operator_reconcile_total",
    "Total number of reconciliations performed",
    ["controller"],
)

RECONCILE_ERRORS = CounterVec(
    "grpcburner_operator_reconcile_errors_total",
    "Total number of reconciliation errors",
    ["controller"],
)

DEFAULT_REGISTRY = Registry()


def register_custom_metrics(registry: Registry | None = None) -> None:
    """Register the operator's counters, in the default registry unless one is given."""
    (registry or DEFAULT_REGISTRY).register(RECONCILE_TOTAL, RECONCILE_ERRORS)