"""
Gremlin Graph Explorer FastAPI Application
Gremlin 쿼리 결과를 {nodes, links} 그래프로 조정하는 메인 애플리케이션
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

# ⚠️ 중요: 환경 변수를 가장 먼저 로드 (다른 모든 import보다 먼저!)
from dotenv import load_dotenv

env_path = Path(__file__).parent / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from app.api import health, query
from app.lib.config_loader import ConfigLoader
from app.lib.errors import (
    ErrorCode,
    GraphAppException,
    QueryInputError,
    language_from_header,
    wrap_exception,
)
from app.lib.logger import get_logger
from app.middleware.error_logger import ErrorLoggingMiddleware
from app.middleware.request_logger import RequestLoggingMiddleware
from app.modules.core.graph import GraphBackendFactory, GraphQueryPipeline

logger = get_logger(__name__)


class GraphExplorerApp:
    """Graph Explorer 메인 애플리케이션 클래스"""

    def __init__(self) -> None:
        self.config: dict[str, Any] | None = None
        self.pipeline: GraphQueryPipeline | None = None

    def initialize(self) -> None:
        """설정 로드 및 파이프라인 생성"""
        logger.info("📋 Loading configuration...")

        # 개발 환경에서는 검증 실패 시 명확한 에러 (프로덕션에서는 Graceful Degradation)
        is_development = os.getenv("NODE_ENV", "development") == "development"
        self.config = ConfigLoader().load_config(validate=True, strict=is_development)

        session_factory = GraphBackendFactory.create_session_factory(self.config)
        self.pipeline = GraphBackendFactory.create_pipeline(self.config, session_factory)

        query.set_dependencies(self.pipeline)
        logger.info("✅ Graph query pipeline initialized")


# 글로벌 앱 인스턴스
graph_app = GraphExplorerApp()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """애플리케이션 라이프사이클 관리"""
    try:
        logger.info("🚀 Starting Graph Explorer API...")
        graph_app.initialize()
        logger.info("✅ Application started successfully")
    except Exception as e:
        logger.error(f"❌ Failed to start application: {e}")
        raise

    yield

    # 세션은 단계마다 열고 닫으므로 종료 시 정리할 공유 연결이 없음
    logger.info("📡 Application shutdown completed")


# FastAPI 앱 생성
app = FastAPI(
    title="Gremlin Graph Explorer API",
    description="Gremlin 쿼리 실행 및 그래프 결과 조정",
    version="1.0.0",
    lifespan=lifespan,
)


def _error_response(request: Request, exc: GraphAppException) -> JSONResponse:
    lang = language_from_header(request.headers.get("Accept-Language"))
    error_response = exc.to_dict(lang=lang, include_solutions=True)

    # error 필드는 사람이 읽을 수 있는 메시지 (UI가 그대로 표시)
    response_content: dict[str, Any] = {
        "error": error_response["message"],
        "error_code": error_response["error_code"],
        "message": error_response["message"],
        "solutions": error_response.get("solutions", []),
    }

    # DEBUG 모드에서만 기술적 세부사항 추가
    if os.getenv("DEBUG", "False").lower() == "true":
        response_content["detail"] = str(exc)
        response_content["context"] = {k: str(v) for k, v in exc.context.items()}

    return JSONResponse(status_code=exc.status_code, content=response_content)


@app.exception_handler(GraphAppException)
async def graph_exception_handler(request: Request, exc: GraphAppException) -> JSONResponse:
    """GraphAppException 통합 핸들러 (양언어 지원, 예외 클래스별 HTTP 상태 코드)"""
    if exc.status_code >= 500:
        logger.error(
            "graph_error",
            error_code=exc.error_code,
            status_code=exc.status_code,
            message=exc.message,
            path=request.url.path,
        )
    else:
        logger.info(
            "graph_client_error",
            error_code=exc.error_code,
            status_code=exc.status_code,
            path=request.url.path,
        )
    return _error_response(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 본문 형식 오류 → 400 (QUERY-003)"""
    reasons = "; ".join(
        f"{'.'.join(str(loc) for loc in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in exc.errors()
    )
    return _error_response(request, QueryInputError(ErrorCode.QUERY_003, reason=reasons))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """일반 예외 핸들러 (fallback, 양언어 지원)"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    wrapped_error = wrap_exception(exc, default_code=ErrorCode.GENERAL_001, path=str(request.url))
    return _error_response(request, wrapped_error)


# 미들웨어 설정
# 배포 환경에서의 CORS 허용 도메인은 환경 변수 ALLOWED_ORIGINS(콤마 구분)로 확장 가능
default_allowed_origins = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://localhost:5173",
]
env_allowed_origins = os.getenv("ALLOWED_ORIGINS", "")
if env_allowed_origins:
    default_allowed_origins.extend(
        [origin.strip() for origin in env_allowed_origins.split(",") if origin.strip()]
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=default_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)

# Error Logging Middleware (라우트 밖으로 빠져나가는 에러 자동 로깅)
app.add_middleware(ErrorLoggingMiddleware)

# 요청 로깅 (가장 바깥쪽)
app.add_middleware(RequestLoggingMiddleware)

# 라우터 등록
app.include_router(health.router)
app.include_router(query.router, prefix="/api")


@app.get("/")
async def root() -> RedirectResponse:
    """루트 엔드포인트 - FastAPI 스웨거 페이지로 리다이렉트"""
    return RedirectResponse(url="/docs")


@app.get("/api")
async def api_info() -> dict[str, Any]:
    """API 정보 엔드포인트"""
    return {
        "name": "Gremlin Graph Explorer API",
        "version": "1.0.0",
        "status": "운영 중",
        "backends": GraphBackendFactory.get_supported_backends(),
        "endpoints": {
            "건강 상태": "/health",
            "쿼리 실행": "/api/query",
            "엣지 속성 조회": "/api/query/edge-properties",
            "연결 테스트": "/api/test-connection",
        },
        "usage": {
            "query_example": {
                "url": "/api/query",
                "method": "POST",
                "body": {
                    "query": "g.V().outE().limit(10)",
                    "host": "localhost",
                    "port": "8182",
                    "type": "janus",
                    "autoConnect": True,
                },
            }
        },
    }


def main() -> None:
    """메인 실행 함수"""
    port = int(os.getenv("PORT", 8000))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"🚀 Starting server on {host}:{port}")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.getenv("DEBUG", "false").lower() == "true",
        reload_excludes=["logs/*", "*.log"],
        log_level="info",
    )


if __name__ == "__main__":
    main()
