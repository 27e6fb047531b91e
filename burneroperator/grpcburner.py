"""Reconciler that keeps a Deployment of burners in line with a GrpcBurner."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .api import GrpcBurner, ObjectMeta
from .client import InMemoryClient, NotFoundError, ObjectKey, Request, Result
from .metrics import RECONCILE_ERRORS, RECONCILE_TOTAL, CounterVec
from .resources import (
    Container,
    Deployment,
    DeploymentSpec,
    LabelSelector,
    PodSpec,
    PodTemplateSpec,
)

GRPCBURNER_FINALIZER = "grpcburner.grpc.burner.dev/finalizer"
BURNER_IMAGE = "stsukada/grpc-burner-demo:latest"
CONTROLLER_LABEL = "grpcburner"

_log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_deployment(grpcburner: GrpcBurner) -> Deployment:
    """Return the Deployment that runs the burners of ``grpcburner``."""
    meta = grpcburner.metadata
    spec = grpcburner.spec
    return Deployment(
        metadata=ObjectMeta(name=f"{meta.name}-burner", namespace=meta.namespace),
        spec=DeploymentSpec(
            replicas=spec.replicas,
            selector=LabelSelector(match_labels={"app": meta.name}),
            template=PodTemplateSpec(
                metadata=ObjectMeta(labels={"app": meta.name}),
                spec=PodSpec(
                    containers=[
                        Container(
                            name="grpc-burner",
                            image=BURNER_IMAGE,
                            args=[
                                "--mode", spec.mode,
                                "--message-size", str(spec.message_size),
                                "--qps", str(spec.qps),
                                "--duration", spec.duration,
                            ],
                            resources=copy.deepcopy(spec.resources),
                        )
                    ]
                ),
            ),
        ),
    )


def is_deployment_spec_equal(a: DeploymentSpec, b: DeploymentSpec) -> bool:
    """Compare replica counts and containers; both replica counts must be set."""
    return (
        a.replicas is not None
        and b.replicas is not None
        and a.replicas == b.replicas
        and a.template.spec.containers == b.template.spec.containers
    )


@dataclass
class GrpcBurnerReconciler:
    """Manages the burner Deployment, its finalizer, and the GrpcBurner status."""

    client: InMemoryClient
    reconcile_total: CounterVec = field(default=RECONCILE_TOTAL)
    reconcile_errors: CounterVec = field(default=RECONCILE_ERRORS)
    clock: Callable[[], datetime] = field(default=_utcnow)
    log: logging.Logger = field(default=_log)

    def _failed(self) -> None:
        self.reconcile_errors.inc(CONTROLLER_LABEL)

    def reconcile(self, request: Request) -> Result:
        log = self.log
        self.reconcile_total.inc(CONTROLLER_LABEL)

        try:
            grpcburner = self.client.get(GrpcBurner, request.key)
        except NotFoundError:
            self._failed()
            return Result()
        except Exception:
            self._failed()
            raise

        meta = grpcburner.metadata
        deploy_key = ObjectKey(namespace=meta.namespace, name=f"{meta.name}-burner")

        if not meta.is_being_deleted:
            if meta.add_finalizer(GRPCBURNER_FINALIZER):
                self.client.update(grpcburner)
        else:
            if meta.has_finalizer(GRPCBURNER_FINALIZER):
                log.info("Running finalizer: deleting Deployment %s", deploy_key)
                try:
                    self.client.delete(self.client.get(Deployment, deploy_key))
                except NotFoundError:
                    pass
                except Exception:
                    self._failed()
                    raise
                meta.remove_finalizer(GRPCBURNER_FINALIZER)
                try:
                    self.client.update(grpcburner)
                except Exception:
                    self._failed()
                    raise
            return Result()

        try:
            deploy = self.client.get(Deployment, deploy_key)
        except NotFoundError:
            deploy = generate_deployment(grpcburner)
            try:
                self.client.create(deploy)
            except Exception:
                log.error("failed to create Deployment %s", deploy_key)
                self._failed()
                raise
            log.info("Deployment created: %s", deploy.metadata.name)
        except Exception:
            self._failed()
            raise
        else:
            desired = generate_deployment(grpcburner)
            if not is_deployment_spec_equal(deploy.spec, desired.spec):
                deploy.spec = desired.spec
                try:
                    self.client.update(deploy)
                except Exception:
                    log.error("failed to update Deployment %s", deploy_key)
                    raise
                log.info(
                    "Updated Deployment to reflect spec changes: %s",
                    deploy.metadata.name,
                )

        phase = "Pending"
        if deploy.status.ready_replicas == grpcburner.spec.replicas:
            phase = "Running"
        elif deploy.status.unavailable_replicas > 0:
            phase = "Failed"

        status = grpcburner.status
        updated = False
        if status.ready_replicas != deploy.status.ready_replicas:
            status.ready_replicas = deploy.status.ready_replicas
            updated = True
        if status.phase != phase:
            status.phase = phase
            status.last_run_time = self.clock()
            updated = True

        if updated:
            try:
                self.client.get(GrpcBurner, request.key)
            except Exception:
                log.error("failed to re-fetch GrpcBurner before status update")
                self._failed()
                raise
            try:
                self.client.update_status(grpcburner)
            except Exception:
                log.error("failed to update status")
                self._failed()
                raise

        return Result()