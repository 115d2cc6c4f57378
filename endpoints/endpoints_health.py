import time
from datetime import datetime, timezone

from fastapi import Request, APIRouter

from limiter import limiter
from constants import limit_value_api, SCOPE_API

router_health = APIRouter(tags=["Health"])


@router_health.get("/health", summary="Health check")
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def health(request: Request):
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
    }
