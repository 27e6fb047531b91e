import pytest

from burneroperator.api import BurnerJob, GrpcBurner, ObjectMeta, OwnerReference, ResourceRequirements
from burneroperator.resources import (
    AlreadyOwnedError,
    ConditionStatus,
    Container,
    Deployment,
    Job,
    JobConditionType,
    set_controller_reference,
)


def _owner(name="burn", namespace="default", uid="uid-1"):
    return BurnerJob(metadata=ObjectMeta(name=name, namespace=namespace, uid=uid))


def test_set_controller_reference_adds_controller_ref():
    owner = _owner()
    job = Job(metadata=ObjectMeta(name="burn-job", namespace="default"))
    set_controller_reference(owner, job)
    assert len(job.metadata.owner_references) == 1
    ref = job.metadata.owner_references[0]
    assert ref.kind == "BurnerJob"
    assert ref.name == "burn"
    assert ref.uid == "uid-1"
    assert ref.api_version == BurnerJob.API_VERSION
    assert ref.controller and ref.block_owner_deletion


def test_set_controller_reference_twice_keeps_one():
    owner = _owner()
    job = Job(metadata=ObjectMeta(name="burn-job", namespace="default"))
    set_controller_reference(owner, job)
    owner.metadata.uid = "uid-2"
    set_controller_reference(owner, job)
    assert [r.uid for r in job.metadata.owner_references] == ["uid-2"]


def test_other_controller_rejected():
    job = Job(metadata=ObjectMeta(name="burn-job", namespace="default"))
    set_controller_reference(_owner(name="first"), job)
    with pytest.raises(AlreadyOwnedError):
        set_controller_reference(_owner(name="second"), job)
    assert job.metadata.owner_references[0].name == "first"


def test_non_controller_reference_is_kept():
    plain = OwnerReference(api_version="v1", kind="ConfigMap", name="cm")
    job = Job(metadata=ObjectMeta(name="j", namespace="default", owner_references=[plain]))
    set_controller_reference(_owner(), job)
    assert job.metadata.owner_references[0] == plain
    assert len(job.metadata.owner_references) == 2


def test_cross_namespace_rejected():
    job = Job(metadata=ObjectMeta(name="j", namespace="other"))
    with pytest.raises(ValueError, match="cross-namespace"):
        set_controller_reference(_owner(), job)
    assert job.metadata.owner_references == []


def test_same_name_different_kind_is_another_owner():
    job = Job(metadata=ObjectMeta(name="j", namespace="default"))
    set_controller_reference(_owner(name="x"), job)
    other = GrpcBurner(metadata=ObjectMeta(name="x", namespace="default"))
    with pytest.raises(AlreadyOwnedError):
        set_controller_reference(other, job)


def test_containers_compare_by_value():
    a = Container(name="c", image="img", args=["--qps", "10"], resources=ResourceRequirements())
    b = Container(name="c", image="img", args=["--qps", "10"])
    assert a == b
    b.args.append("--extra")
    assert a != b


def test_enum_values_compare_with_strings():
    assert JobConditionType("Complete") is JobConditionType.COMPLETE
    assert JobConditionType("Complete") == "Complete"
    assert ConditionStatus("True") is ConditionStatus.TRUE
    assert ConditionStatus("True") == "True"
    with pytest.raises(ValueError):
        JobConditionType("Finished")


def test_default_workloads_are_empty():
    deploy = Deployment()
    assert deploy.spec.replicas is None
    assert deploy.status.ready_replicas == 0
    assert Job().status.conditions == []