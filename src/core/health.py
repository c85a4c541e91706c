"""Service health checks.

Aggregates per-dependency checks (document store, catalog) into one report
served by the API's /health and /ready routes.

Example:
    checker = HealthChecker(version="1.0.0")
    checker.add_check("document_store", check_store)
    report = await checker.check_all()
"""

import asyncio
import time
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from src.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CHECK_TIMEOUT = 10.0  # seconds


class ServiceStatus(Enum):
    """Status of an individual service."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"
    UNKNOWN = "unknown"


@dataclass
class ServiceCheck:
    """Result of a single service health check."""

    name: str
    status: ServiceStatus
    latency_ms: float | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class HealthReport:
    """Aggregated health report for all services."""

    status: ServiceStatus
    timestamp: str
    checks: list[ServiceCheck]
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "version": self.version,
            "checks": [
                {
                    "name": check.name,
                    "status": check.status.value,
                    "latency_ms": check.latency_ms,
                    "message": check.message,
                    "details": check.details,
                }
                for check in self.checks
            ],
        }


HealthCheckFunc = Callable[[], Coroutine[Any, Any, ServiceCheck]]


def overall_status(checks: list[ServiceCheck]) -> ServiceStatus:
    """Worst status wins; an empty list is healthy."""
    if all(c.status == ServiceStatus.HEALTHY for c in checks):
        return ServiceStatus.HEALTHY
    if any(c.status == ServiceStatus.UNHEALTHY for c in checks):
        return ServiceStatus.UNHEALTHY
    if any(c.status == ServiceStatus.DEGRADED for c in checks):
        return ServiceStatus.DEGRADED
    return ServiceStatus.UNKNOWN


class HealthChecker:
    """Runs registered health checks concurrently."""

    def __init__(
        self,
        version: str | None = None,
        timeout: float = DEFAULT_CHECK_TIMEOUT,
    ) -> None:
        """Initialize the health checker.

        Args:
            version: Application version to include in health reports.
            timeout: Seconds before a single check counts as unhealthy.
        """
        self._checks: dict[str, HealthCheckFunc] = {}
        self._version = version
        self._timeout = timeout

    @property
    def check_names(self) -> list[str]:
        return list(self._checks)

    def add_check(self, name: str, check_func: HealthCheckFunc) -> None:
        self._checks[name] = check_func

    def remove_check(self, name: str) -> None:
        self._checks.pop(name, None)

    async def check_one(self, name: str) -> ServiceCheck:
        """Run a single health check.

        Raises:
            KeyError: If no check is registered with that name.
        """
        if name not in self._checks:
            raise KeyError(f"No health check registered for: {name}")

        start = time.perf_counter()
        try:
            result = await asyncio.wait_for(self._checks[name](), timeout=self._timeout)
        except TimeoutError:
            result = ServiceCheck(
                name=name,
                status=ServiceStatus.UNHEALTHY,
                message="Health check timed out",
            )
        except Exception as ex:
            result = ServiceCheck(
                name=name,
                status=ServiceStatus.UNHEALTHY,
                message=str(ex),
            )
        if result.latency_ms is None:
            result.latency_ms = round((time.perf_counter() - start) * 1000, 2)
        return result

    async def check_all(self) -> HealthReport:
        """Run all registered health checks."""
        checks = list(await asyncio.gather(*(self.check_one(name) for name in self._checks)))
        report = HealthReport(
            status=overall_status(checks),
            timestamp=datetime.now(UTC).isoformat(),
            checks=checks,
            version=self._version,
        )
        if report.status != ServiceStatus.HEALTHY:
            logger.warning(
                "health_degraded",
                status=report.status.value,
                checks={c.name: c.status.value for c in checks},
            )
        return report
