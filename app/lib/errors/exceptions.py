"""커스텀 예외 클래스 모듈.

Graph Explorer API의 커스텀 예외 클래스를 정의합니다.
각 예외는 에러 코드, 컨텍스트 정보, HTTP 상태 코드를 포함하며
양언어 에러 응답을 생성할 수 있습니다.

에러 분류:
- QueryInputError: 클라이언트 입력 오류 (query 누락 등)
- GraphConnectionError: 백엔드 연결 실패
- QueryExecutionError / QueryCancelledError: 메인 쿼리 실행 실패/취소
- EnrichmentError: 보강 단계 실패 (항상 로컬에서 처리, 호출자에게 노출되지 않음)
"""

from typing import Any

from app.lib.errors.codes import ErrorCode
from app.lib.errors.formatter import format_error_response


class GraphAppException(Exception):
    """Graph Explorer 기본 예외 클래스.

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        error_code: 에러 코드 (예: "CONN-001")
        context: 에러 컨텍스트 정보 (메시지 포맷팅에 사용)
        status_code: API 응답에 사용할 HTTP 상태 코드
    """

    status_code: int = 500

    def __init__(self, error_code: str | ErrorCode, **context: Any) -> None:
        self.error_code = error_code.value if isinstance(error_code, ErrorCode) else error_code
        self.context = context

        # Exception의 메시지는 한국어 기본값으로 설정
        message = format_error_response(
            self.error_code, lang="ko", include_solutions=False, **context
        )["message"]
        self.message = message
        super().__init__(message)

    def to_dict(self, lang: str = "ko", include_solutions: bool = True) -> dict[str, Any]:
        """에러 응답 딕셔너리로 변환.

        Example:
            >>> exc = QueryInputError(ErrorCode.QUERY_001)
            >>> exc.to_dict(lang="en")["message"]
            'Query is required'
        """
        return format_error_response(
            self.error_code,
            lang=lang,
            include_solutions=include_solutions,
            **self.context,
        )


# 도메인별 예외 클래스


class QueryInputError(GraphAppException):
    """요청 입력 관련 예외."""

    status_code = 400


class GraphConnectionError(GraphAppException):
    """그래프 백엔드 연결 관련 예외."""

    status_code = 503


class QueryExecutionError(GraphAppException):
    """메인 쿼리 실행 관련 예외."""

    status_code = 500


class QueryCancelledError(QueryExecutionError):
    """클라이언트 연결 종료로 인한 쿼리 취소."""

    # nginx 관례 (Client Closed Request)
    status_code = 499


class EnrichmentError(GraphAppException):
    """보강 단계 관련 예외."""

    pass


class ConfigError(GraphAppException):
    """설정 관련 예외."""

    pass


class GeneralError(GraphAppException):
    """일반 예외."""

    pass


def get_exception_class(error_code: str | ErrorCode) -> type[GraphAppException]:
    """에러 코드에 해당하는 예외 클래스 반환.

    Example:
        >>> get_exception_class("CONN-001").__name__
        'GraphConnectionError'
    """
    code_str = error_code.value if isinstance(error_code, ErrorCode) else error_code
    domain = code_str.split("-")[0]

    domain_map: dict[str, type[GraphAppException]] = {
        "QUERY": QueryInputError,
        "CONN": GraphConnectionError,
        "EXEC": QueryExecutionError,
        "ENRICH": EnrichmentError,
        "CONFIG": ConfigError,
        "GENERAL": GeneralError,
    }

    if code_str == ErrorCode.EXEC_003.value:
        return QueryCancelledError

    return domain_map.get(domain, GraphAppException)


def wrap_exception(
    error: Exception,
    default_code: str | ErrorCode = ErrorCode.GENERAL_001,
    **context: Any,
) -> GraphAppException:
    """기존 예외를 GraphAppException으로 래핑.

    Example:
        >>> try:
        ...     raise OSError("connection refused")
        ... except Exception as e:
        ...     raise wrap_exception(e, ErrorCode.CONN_001, endpoint=url, reason=str(e))
    """
    # 이미 GraphAppException이면 그대로 반환
    if isinstance(error, GraphAppException):
        return error

    code_str = default_code.value if isinstance(default_code, ErrorCode) else default_code

    context["original_error_type"] = type(error).__name__
    context["original_error_message"] = str(error)

    exc_class = get_exception_class(code_str)

    return exc_class(code_str, **context)
