import pytest

from burneroperator.api import BurnerJob, BurnerJobSpec, BurnerJobStatus, ObjectMeta
from burneroperator.burnerjob import BurnerJobReconciler, build_job
from burneroperator.client import (
    AlreadyExistsError,
    InMemoryClient,
    ObjectKey,
    Request,
    Result,
)
from burneroperator.resources import Job


def _burnerjob(**status):
    return BurnerJob(
        metadata=ObjectMeta(name="test-burn", namespace="default"),
        spec=BurnerJobSpec(
            target_service="grpc-service.default.svc:50051",
            qps=100,
            duration="10s",
        ),
        status=BurnerJobStatus(**status),
    )


def test_reconcile_creates_job():
    burnerjob = _burnerjob()
    client = InMemoryClient(burnerjob)
    reconciler = BurnerJobReconciler(client=client)

    result = reconciler.reconcile(Request.for_object(burnerjob))

    assert result == Result()
    job = client.get(Job, ObjectKey(namespace="default", name="test-burn-job"))
    assert job.metadata.name == "test-burn-job"
    assert job.metadata.labels == {"burnerjob": "test-burn"}


def test_created_job_is_controlled_by_burnerjob():
    burnerjob = _burnerjob()
    client = InMemoryClient(burnerjob)
    BurnerJobReconciler(client=client).reconcile(Request.for_object(burnerjob))

    stored = client.get(BurnerJob, ObjectKey("default", "test-burn"))
    job = client.get(Job, ObjectKey("default", "test-burn-job"))
    [owner] = job.metadata.owner_references
    assert owner.kind == "BurnerJob"
    assert owner.name == "test-burn"
    assert owner.controller is True
    assert owner.uid == stored.metadata.uid


def test_build_job_fields():
    job = build_job(_burnerjob())
    assert job.metadata.namespace == "default"
    assert job.spec.ttl_seconds_after_finished == 30
    pod = job.spec.template.spec
    assert pod.restart_policy == "Never"
    [container] = pod.containers
    assert container.name == "grpc-burner"
    assert container.image == "stsukada/grpc-burner-demo:latest"
    assert container.args == [
        "--target", "grpc-service.default.svc:50051",
        "--qps", "100",
        "--duration", "10s",
    ]


def test_missing_burnerjob_is_ignored():
    client = InMemoryClient()
    result = BurnerJobReconciler(client=client).reconcile(
        Request(namespace="default", name="absent")
    )
    assert result == Result()
    assert client.list(Job) == []


def test_second_reconcile_fails_because_job_exists():
    burnerjob = _burnerjob()
    client = InMemoryClient(burnerjob)
    reconciler = BurnerJobReconciler(client=client)
    reconciler.reconcile(Request.for_object(burnerjob))

    with pytest.raises(AlreadyExistsError):
        reconciler.reconcile(Request.for_object(burnerjob))
    assert len(client.list(Job, "default")) == 1


def test_status_is_cleared_when_new_job_created():
    burnerjob = _burnerjob(phase="Succeeded", message="done")
    client = InMemoryClient(burnerjob)
    BurnerJobReconciler(client=client).reconcile(Request.for_object(burnerjob))

    stored = client.get(BurnerJob, ObjectKey("default", "test-burn"))
    assert stored.status.phase == ""
    assert stored.status.message == ""