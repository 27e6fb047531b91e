"""Reconciler that runs a BurnerJob as a batch Job."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .api import BurnerJob
from .client import InMemoryClient, NotFoundError, ObjectKey, Request, Result
from .resources import (
    ConditionStatus,
    Container,
    Job,
    JobConditionType,
    JobSpec,
    PodSpec,
    PodTemplateSpec,
    RestartPolicy,
    set_controller_reference,
)
from .api import ObjectMeta

BURNER_IMAGE = "stsukada/grpc-burner-demo:latest"
CONTAINER_NAME = "grpc-burner"
JOB_TTL_SECONDS = 30

_log = logging.getLogger(__name__)


def build_job(burnerjob: BurnerJob) -> Job:
    """Return the Job that carries out ``burnerjob``."""
    meta = burnerjob.metadata
    spec = burnerjob.spec
    return Job(
        metadata=ObjectMeta(
            name=f"{meta.name}-job",
            namespace=meta.namespace,
            labels={"burnerjob": meta.name},
        ),
        spec=JobSpec(
            ttl_seconds_after_finished=JOB_TTL_SECONDS,
            template=PodTemplateSpec(
                spec=PodSpec(
                    containers=[
                        Container(
                            name=CONTAINER_NAME,
                            image=BURNER_IMAGE,
                            args=[
                                "--target", spec.target_service,
                                "--qps", str(spec.qps),
                                "--duration", spec.duration,
                            ],
                        )
                    ],
                    restart_policy=RestartPolicy.NEVER.value,
                )
            ),
        ),
    )


def _phase_from_conditions(conditions) -> tuple[str, str]:
    phase = ""
    message = ""
    for condition in conditions:
        if condition.status != ConditionStatus.TRUE.value:
            continue
        if condition.type == JobConditionType.COMPLETE.value:
            phase, message = "Succeeded", condition.message
        elif condition.type == JobConditionType.FAILED.value:
            phase, message = "Failed", condition.message
    return phase, message


@dataclass
class BurnerJobReconciler:
    """Creates the Job for a BurnerJob and mirrors the Job's outcome in its status."""

    client: InMemoryClient
    log: logging.Logger = field(default=_log)

    def reconcile(self, request: Request) -> Result:
        log = self.log
        try:
            burnerjob = self.client.get(BurnerJob, request.key)
        except NotFoundError:
            log.error("unable to fetch BurnerJob %s", request.key)
            return Result()
        log.info(
            "Reconciling BurnerJob %s, TargetService=%s",
            request.key,
            burnerjob.spec.target_service,
        )

        job_name = f"{request.name}-job"
        existing_conditions = []
        try:
            existing = self.client.get(
                Job, ObjectKey(namespace=request.namespace, name=job_name)
            )
        except NotFoundError:
            pass
        else:
            log.info("Job %s already exists, skipping creation", job_name)
            existing_conditions = existing.status.conditions

        job = build_job(burnerjob)
        set_controller_reference(burnerjob, job)
        try:
            self.client.create(job)
        except Exception:
            log.error("Failed to create Job %s", job.metadata.name)
            raise
        log.info("Created new Job %s", job.metadata.name)

        phase, message = _phase_from_conditions(existing_conditions)
        status = burnerjob.status
        updated = False
        if status.phase != phase:
            status.phase = phase
            updated = True
        if status.message != message:
            status.message = message
            updated = True

        if updated:
            try:
                self.client.update_status(burnerjob)
            except Exception:
                log.error("Failed to update BurnerJob status")
                raise
            log.info("Updated BurnerJob status, phase=%s", phase)
        return Result()