"""Reconciler that records the applied observability settings in status."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .api import ObservabilityConfig
from .client import InMemoryClient, NotFoundError, Request, Result

APPLIED_MESSAGE = "settings changed"

_log = logging.getLogger(__name__)


@dataclass
class ObservabilityConfigReconciler:
    """Copies the requested log level and metrics switch into the status."""

    client: InMemoryClient
    log: logging.Logger = field(default=_log)

    def reconcile(self, request: Request) -> Result:
        try:
            config = self.client.get(ObservabilityConfig, request.key)
        except NotFoundError:
            self.log.error("unable to fetch ObservabilityConfig %s", request.key)
            return Result()

        self.log.info(
            "Reconciling ObservabilityConfig %s, logLevel=%s, metricsEnabled=%s",
            config.metadata.name,
            config.spec.log_level,
            config.spec.metrics_enabled,
        )
        config.status.applied_log_level = config.spec.log_level
        config.status.metrics_active = config.spec.metrics_enabled
        config.status.message = APPLIED_MESSAGE

        try:
            self.client.update_status(config)
        except Exception:
            self.log.error("Status update failed")
            raise
        return Result()