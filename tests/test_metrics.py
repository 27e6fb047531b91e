import pytest

from burneroperator.metrics import (
    RECONCILE_ERRORS,
    RECONCILE_TOTAL,
    CounterVec,
    Registry,
    register_custom_metrics,
)


def _counter(name="requests_total"):
    return CounterVec(name, "help text", ["controller"])


def test_inc_counts_per_label():
    counter = _counter()
    counter.inc("grpcburner")
    counter.inc("grpcburner")
    counter.inc("burnerjob")
    assert counter.value("grpcburner") == 2
    assert counter.value("burnerjob") == 1


def test_unseen_label_is_zero():
    assert _counter().value("grpcburner") == 0


def test_label_cardinality_checked():
    counter = _counter()
    with pytest.raises(ValueError):
        counter.inc(("a", "b"))
    with pytest.raises(ValueError):
        counter.value(())


def test_multi_label_counter():
    counter = CounterVec("pairs_total", "help", ["a", "b"])
    counter.inc(("x", "y"))
    assert counter.value(["x", "y"]) == 1
    assert counter.value(("y", "x")) == 0


def test_registry_rejects_duplicates():
    registry = Registry()
    registry.register(_counter("one"))
    with pytest.raises(ValueError, match="one"):
        registry.register(_counter("one"))
    assert len(registry) == 1


def test_operator_counters_have_controller_label():
    assert RECONCILE_TOTAL.label_names == ("controller",)
    assert RECONCILE_ERRORS.help == "Total number of reconciliation errors"
    before = RECONCILE_ERRORS.value("label-check")
    RECONCILE_ERRORS.inc("label-check")
    assert RECONCILE_ERRORS.value("label-check") == before + 1
    with pytest.raises(ValueError):
        RECONCILE_TOTAL.inc(("grpcburner", "extra"))