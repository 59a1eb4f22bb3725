"""Health service implementation."""

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ... import __version__
from ...config import get_settings
from ..redis_client import get_redis_client
from ..schemas.common import HealthCheckResponse
from .interfaces import IHealthService

_STARTED_AT = time.monotonic()


class HealthService(IHealthService):
    """Health checks for the database, Redis and the realtime hubs."""

    def __init__(self, session: AsyncSession, hub_registry: Optional[Any] = None):
        self.session = session
        self.hub_registry = hub_registry
        self.settings = get_settings()

    async def get_health_status(self) -> HealthCheckResponse:
        db_health = await self.check_database_health()
        redis_health = await self.check_redis_health()

        # Redis only backs logout; the board keeps working without it
        overall_status = "healthy"
        if not db_health["connected"]:
            overall_status = "unhealthy"
        elif not redis_health["connected"]:
            overall_status = "degraded"

        return HealthCheckResponse(
            status=overall_status,
            version=__version__,
            checks={"database": db_health, "redis": redis_health},
        )

    async def check_database_health(self) -> Dict[str, Any]:
        try:
            start = time.perf_counter()
            result = await self.session.execute(text("SELECT 1"))
            result.scalar()
            return {
                "connected": True,
                "status": "healthy",
                "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
            }
        except Exception as e:
            return {"connected": False, "status": "unhealthy", "error": str(e), "response_time_ms": None}

    async def check_redis_health(self) -> Dict[str, Any]:
        redis_client = get_redis_client()
        start = time.perf_counter()
        if not await redis_client.ping():
            return {"connected": False, "status": "unhealthy", "response_time_ms": None}
        return {
            "connected": True,
            "status": "healthy",
            "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
        }

    async def get_system_metrics(self) -> Dict[str, Any]:
        metrics = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime_seconds": round(time.monotonic() - _STARTED_AT, 1),
            "broadcast_scope": self.settings.broadcast_scope,
            "active_connections": None,
            "active_hubs": None,
        }
        if self.hub_registry is not None:
            metrics["active_connections"] = self.hub_registry.connection_count()
            metrics["active_hubs"] = len(self.hub_registry)
        return metrics
