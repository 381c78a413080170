"""
Health check API endpoints

/health 는 프로세스 생존 여부와 파이프라인 주입 상태만 보고합니다.
그래프 백엔드 연결 확인은 POST /api/test-connection 이 담당합니다.
"""

import os
import time
from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel

from . import query

router = APIRouter(tags=["Health"])

_started_at = time.monotonic()


class HealthResponse(BaseModel):
    """Health 체크 응답 모델"""

    status: str
    timestamp: str
    uptime_seconds: float
    environment: str
    version: str = "1.0.0"
    pipeline_ready: bool
    default_endpoint: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    graph_pipeline = query.pipeline
    default_endpoint = None
    if graph_pipeline is not None:
        gremlin = graph_pipeline.gremlin_config
        default_endpoint = f"{gremlin.default_host}:{gremlin.default_port}"

    return HealthResponse(
        status="OK",
        timestamp=datetime.now().isoformat(),
        uptime_seconds=round(time.monotonic() - _started_at, 3),
        environment=os.getenv("ENVIRONMENT") or os.getenv("NODE_ENV", "development"),
        pipeline_ready=graph_pipeline is not None,
        default_endpoint=default_endpoint,
    )


@router.get("/ping")
async def ping() -> dict[str, str]:
    return {"message": "pong", "timestamp": datetime.now().isoformat()}
