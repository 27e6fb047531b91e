"""Workload objects created by the controllers, and owner references."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from .api import ObjectMeta, OwnerReference, ResourceRequirements


class JobConditionType(str, Enum):
    COMPLETE = "Complete"
    FAILED = "Failed"


class ConditionStatus(str, Enum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class RestartPolicy(str, Enum):
    ALWAYS = "Always"
    ON_FAILURE = "OnFailure"
    NEVER = "Never"


class AlreadyOwnedError(ValueError):
    """The object already has a different controller."""


@dataclass
class Container:
    name: str
    image: str = ""
    args: list[str] = field(default_factory=list)
    resources: ResourceRequirements = field(default_factory=ResourceRequirements)


@dataclass
class PodSpec:
    containers: list[Container] = field(default_factory=list)
    restart_policy: str = ""


@dataclass
class PodTemplateSpec:
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: PodSpec = field(default_factory=PodSpec)


@dataclass
class JobCondition:
    type: str
    status: str
    message: str = ""


@dataclass
class JobSpec:
    template: PodTemplateSpec = field(default_factory=PodTemplateSpec)
    ttl_seconds_after_finished: int | None = None


@dataclass
class JobStatus:
    conditions: list[JobCondition] = field(default_factory=list)


@dataclass
class Job:
    KIND: ClassVar[str] = "Job"
    API_VERSION: ClassVar[str] = "batch/v1"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: JobSpec = field(default_factory=JobSpec)
    status: JobStatus = field(default_factory=JobStatus)


@dataclass
class LabelSelector:
    match_labels: dict[str, str] = field(default_factory=dict)


@dataclass
class DeploymentSpec:
    replicas: int | None = None
    selector: LabelSelector | None = None
    template: PodTemplateSpec = field(default_factory=PodTemplateSpec)


@dataclass
class DeploymentStatus:
    ready_replicas: int = 0
    unavailable_replicas: int = 0


@dataclass
class Deployment:
    KIND: ClassVar[str] = "Deployment"
    API_VERSION: ClassVar[str] = "apps/v1"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DeploymentSpec = field(default_factory=DeploymentSpec)
    status: DeploymentStatus = field(default_factory=DeploymentStatus)


def _api_group(api_version: str) -> str:
    group, _, _ = api_version.rpartition("/")
    return group


def _same_owner(a: OwnerReference, b: OwnerReference) -> bool:
    return (
        _api_group(a.api_version) == _api_group(b.api_version)
        and a.kind == b.kind
        and a.name == b.name
    )


def set_controller_reference(owner, obj) -> None:
    """Make ``owner`` the controlling owner of ``obj``.

    Raises ValueError when a namespaced owner and the object live in different
    namespaces, and AlreadyOwnedError when another object already controls it.
    """
    owner_meta = owner.metadata
    meta = obj.metadata
    if owner_meta.namespace and owner_meta.namespace != meta.namespace:
        raise ValueError(
            f"cross-namespace owner references are disallowed: owner "
            f"{owner_meta.namespace}/{owner_meta.name}, object "
            f"{meta.namespace}/{meta.name}"
        )

    reference = OwnerReference(
        api_version=owner.API_VERSION,
        kind=owner.KIND,
        name=owner_meta.name,
        uid=owner_meta.uid,
        controller=True,
        block_owner_deletion=True,
    )
    for existing in meta.owner_references:
        if existing.controller and not _same_owner(existing, reference):
            raise AlreadyOwnedError(
                f"object {meta.namespace}/{meta.name} is already owned by "
                f"{existing.kind} {existing.name}"
            )

    for position, existing in enumerate(meta.owner_references):
        if _same_owner(existing, reference):
            meta.owner_references[position] = reference
            break
    else:
        meta.owner_references.append(reference)