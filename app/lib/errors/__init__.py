"""에러 처리 라이브러리.

Graph Explorer API의 에러 코드, 메시지, 예외 클래스를 제공합니다.

주요 컴포넌트:
- ErrorCode: 에러 코드 Enum
- 예외 클래스: GraphAppException 및 도메인별 예외 클래스
- 포맷팅 함수: 에러 메시지 및 응답 생성 함수
- 양언어 지원: 한국어(기본) 및 영어 메시지

사용 예시:
    >>> from app.lib.errors import ErrorCode, QueryInputError, get_error_message
    >>>
    >>> raise QueryInputError(ErrorCode.QUERY_001)
    >>>
    >>> get_error_message("QUERY-001")
    "쿼리가 필요합니다"
    >>>
    >>> get_error_message("QUERY-001", lang="en")
    "Query is required"
"""

# 에러 코드
from app.lib.errors.codes import ErrorCode

# 예외 클래스
from app.lib.errors.exceptions import (
    ConfigError,
    EnrichmentError,
    GeneralError,
    GraphAppException,
    GraphConnectionError,
    QueryCancelledError,
    QueryExecutionError,
    QueryInputError,
    get_exception_class,
    wrap_exception,
)

# 포맷팅 함수
from app.lib.errors.formatter import (
    format_error_response,
    get_default_language,
    get_error_message,
    get_error_solutions,
    language_from_header,
)

__all__ = [
    # 에러 코드
    "ErrorCode",
    # 예외 클래스
    "GraphAppException",
    "QueryInputError",
    "GraphConnectionError",
    "QueryExecutionError",
    "QueryCancelledError",
    "EnrichmentError",
    "ConfigError",
    "GeneralError",
    # 유틸리티 함수
    "get_exception_class",
    "wrap_exception",
    # 포맷팅 함수
    "get_error_message",
    "get_error_solutions",
    "format_error_response",
    "get_default_language",
    "language_from_header",
]
