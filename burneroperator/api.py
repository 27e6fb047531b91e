"""Custom resource types of the grpc.burner.dev/v1alpha1 API group."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with one of its versions."""

    group: str
    version: str

    @property
    def api_version(self) -> str:
        """The ``apiVersion`` string written into manifests."""
        return f"{self.group}/{self.version}" if self.group else self.version

    def __str__(self) -> str:
        return self.api_version


GROUP_VERSION = GroupVersion(group="grpc.burner.dev", version="v1alpha1")

GRPC_BURNER_MODES = (
    "unary",
    "server-streaming",
    "client-streaming",
    "bidirectional-streaming",
)

_DURATION_PATTERN = re.compile(r"\d+[smh]")


@dataclass
class OwnerReference:
    """A link from a dependent object to the object that owns it."""

    api_version: str
    kind: str
    name: str
    uid: str = ""
    controller: bool = False
    block_owner_deletion: bool = False


@dataclass
class ObjectMeta:
    """Metadata shared by every stored object."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    finalizers: list[str] = field(default_factory=list)
    owner_references: list[OwnerReference] = field(default_factory=list)
    uid: str = ""
    resource_version: int = 0
    deletion_timestamp: datetime | None = None

    @property
    def is_being_deleted(self) -> bool:
        return self.deletion_timestamp is not None

    def has_finalizer(self, name: str) -> bool:
        return name in self.finalizers

    def add_finalizer(self, name: str) -> bool:
        """Add a finalizer; return True if the list changed."""
        if name in self.finalizers:
            return False
        self.finalizers.append(name)
        return True

    def remove_finalizer(self, name: str) -> bool:
        """Remove every occurrence of a finalizer; return True if the list changed."""
        if name not in self.finalizers:
            return False
        self.finalizers = [f for f in self.finalizers if f != name]
        return True


@dataclass
class ResourceRequirements:
    """Compute resource limits and requests of a container."""

    limits: dict[str, str] = field(default_factory=dict)
    requests: dict[str, str] = field(default_factory=dict)


@dataclass
class BurnerJobSpec:
    target_service: str = ""
    qps: int = 0
    duration: str = ""


@dataclass
class BurnerJobStatus:
    phase: str = ""
    message: str = ""


@dataclass
class BurnerJob:
    """A one-shot load run against a target service."""

    KIND: ClassVar[str] = "BurnerJob"
    API_VERSION: ClassVar[str] = GROUP_VERSION.api_version

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: BurnerJobSpec = field(default_factory=BurnerJobSpec)
    status: BurnerJobStatus = field(default_factory=BurnerJobStatus)


@dataclass
class GrpcBurnerSpec:
    replicas: int = 0
    mode: str = ""
    message_size: int = 0
    qps: int = 0
    duration: str = ""
    resources: ResourceRequirements = field(default_factory=ResourceRequirements)

    def validate(self) -> GrpcBurnerSpec:
        """Check the schema constraints; raise ValueError listing every violation."""
        problems = [
            f"{label} must be at least 1, got {value}"
            for label, value in (
                ("replicas", self.replicas),
                ("messageSize", self.message_size),
                ("qps", self.qps),
            )
            if value < 1
        ]
        if self.mode not in GRPC_BURNER_MODES:
            problems.append(
                f"mode must be one of {', '.join(GRPC_BURNER_MODES)}, got {self.mode!r}"
            )
        if not _DURATION_PATTERN.fullmatch(self.duration):
            problems.append(
                f"duration must match ^\\d+[smh]$, got {self.duration!r}"
            )
        if problems:
            raise ValueError("; ".join(problems))
        return self


@dataclass
class GrpcBurnerStatus:
    ready_replicas: int = 0
    phase: str = ""
    last_run_time: datetime | None = None


@dataclass
class GrpcBurner:
    """A long-running deployment of gRPC load generators."""

    KIND: ClassVar[str] = "GrpcBurner"
    API_VERSION: ClassVar[str] = GROUP_VERSION.api_version

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: GrpcBurnerSpec = field(default_factory=GrpcBurnerSpec)
    status: GrpcBurnerStatus = field(default_factory=GrpcBurnerStatus)


@dataclass
class ObservabilityConfigSpec:
    metrics_enabled: bool = False
    log_level: str = ""


@dataclass
class ObservabilityConfigStatus:
    applied_log_level: str = ""
    metrics_active: bool | None = None
    message: str = ""


@dataclass
class ObservabilityConfig:
    """Logging and metrics settings for the burners."""

    KIND: ClassVar[str] = "ObservabilityConfig"
    API_VERSION: ClassVar[str] = GROUP_VERSION.api_version

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ObservabilityConfigSpec = field(default_factory=ObservabilityConfigSpec)
    status: ObservabilityConfigStatus = field(default_factory=ObservabilityConfigStatus)