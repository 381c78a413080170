"""에러 메시지 및 해결 방법 저장소.

모든 에러 메시지를 한국어와 영어로 저장하며,
각 에러에 대한 해결 방법도 제공합니다.
"""


# 에러 메시지 저장소: {error_code: {"ko": "한국어 메시지", "en": "English message"}}
ERROR_MESSAGES: dict[str, dict[str, str]] = {
    # QUERY (요청 입력) - 3개
    "QUERY-001": {
        "ko": "쿼리가 필요합니다",
        "en": "Query is required",
    },
    "QUERY-002": {
        "ko": "지원하지 않는 백엔드 유형입니다: {backend_type} (지원 목록: {supported})",
        "en": "Unsupported backend type: {backend_type} (supported: {supported})",
    },
    "QUERY-003": {
        "ko": "요청 본문 형식이 올바르지 않습니다: {reason}",
        "en": "Malformed request body: {reason}",
    },
    # CONN (백엔드 연결) - 2개
    "CONN-001": {
        "ko": "그래프 백엔드에 연결할 수 없습니다 ({endpoint}): {reason}",
        "en": "Cannot connect to graph backend ({endpoint}): {reason}",
    },
    "CONN-002": {
        "ko": "그래프 백엔드 연결 시간 초과 ({endpoint}, {timeout}초)",
        "en": "Graph backend connection timed out ({endpoint}, {timeout}s)",
    },
    # EXEC (쿼리 실행) - 3개
    "EXEC-001": {
        "ko": "쿼리 실행 실패: {reason}",
        "en": "Query execution failed: {reason}",
    },
    "EXEC-002": {
        "ko": "쿼리 실행 시간 초과 ({timeout}초)",
        "en": "Query execution timed out ({timeout}s)",
    },
    "EXEC-003": {
        "ko": "클라이언트 연결이 종료되어 쿼리를 취소했습니다",
        "en": "Query cancelled because the client closed the connection",
    },
    # ENRICH (보강 단계) - 1개
    "ENRICH-001": {
        "ko": "보강 단계 실패 ({stage}): {reason}",
        "en": "Enrichment stage failed ({stage}): {reason}",
    },
    # CONFIG (설정) - 3개
    "CONFIG-001": {
        "ko": "설정 파일을 찾을 수 없습니다: {searched_paths}",
        "en": "Configuration file not found: {searched_paths}",
    },
    "CONFIG-002": {
        "ko": "설정 검증 실패: {validation_errors}",
        "en": "Configuration validation failed: {validation_errors}",
    },
    "CONFIG-003": {
        "ko": "설정 로드 실패: {original_error}",
        "en": "Failed to load configuration: {original_error}",
    },
    # GENERAL (일반) - 1개
    "GENERAL-001": {
        "ko": "예상하지 못한 오류가 발생했습니다",
        "en": "An unexpected error occurred",
    },
}


# 해결 방법 저장소: {error_code: {"ko": [...], "en": [...]}}
ERROR_SOLUTIONS: dict[str, dict[str, list[str]]] = {
    # QUERY (요청 입력)
    "QUERY-001": {
        "ko": [
            "요청 본문에 query 필드를 포함하세요",
            "예시: {\"query\": \"g.V().limit(50)\"}",
        ],
        "en": [
            "Include the query field in the request body",
            "Example: {\"query\": \"g.V().limit(50)\"}",
        ],
    },
    "QUERY-002": {
        "ko": [
            "type 필드에 지원되는 백엔드 유형을 지정하세요",
            "백엔드 유형을 생략하면 janus가 사용됩니다",
        ],
        "en": [
            "Set the type field to a supported backend variant",
            "Omitting the type field defaults to janus",
        ],
    },
    "QUERY-003": {
        "ko": [
            "요청 본문이 올바른 JSON 객체인지 확인하세요",
            "Content-Type 헤더를 application/json으로 설정하세요",
        ],
        "en": [
            "Verify the request body is a valid JSON object",
            "Set the Content-Type header to application/json",
        ],
    },
    # CONN (백엔드 연결)
    "CONN-001": {
        "ko": [
            "Gremlin Server가 실행 중인지 확인하세요",
            "host/port 값이 올바른지 확인하세요",
            "방화벽 또는 네트워크 설정을 확인하세요",
        ],
        "en": [
            "Verify the Gremlin Server is running",
            "Check the host/port values",
            "Review firewall or network settings",
        ],
    },
    "CONN-002": {
        "ko": [
            "Gremlin Server 응답 상태를 확인하세요",
            "gremlin.connect_timeout 값을 늘려보세요",
        ],
        "en": [
            "Check Gremlin Server responsiveness",
            "Increase gremlin.connect_timeout",
        ],
    },
    # EXEC (쿼리 실행)
    "EXEC-001": {
        "ko": [
            "쿼리 문법을 확인하세요",
            "Gremlin Server 로그에서 스크립트 오류를 확인하세요",
        ],
        "en": [
            "Check the query syntax",
            "Inspect the Gremlin Server log for script errors",
        ],
    },
    "EXEC-002": {
        "ko": [
            "limit() 등으로 결과 크기를 줄이세요",
            "pipeline.query_timeout 값을 늘려보세요",
        ],
        "en": [
            "Reduce the result size, e.g. with limit()",
            "Increase pipeline.query_timeout",
        ],
    },
    "EXEC-003": {
        "ko": [
            "쿼리가 끝날 때까지 요청을 유지하세요",
        ],
        "en": [
            "Keep the request open until the query completes",
        ],
    },
    # ENRICH (보강 단계)
    "ENRICH-001": {
        "ko": [
            "executionLog에서 실패한 단계를 확인하세요",
            "메인 결과는 정상적으로 반환됩니다",
        ],
        "en": [
            "Check the failed stage in executionLog",
            "The main result is still returned",
        ],
    },
    # CONFIG (설정)
    "CONFIG-001": {
        "ko": [
            "app/config/base.yaml 파일이 존재하는지 확인하세요",
            "작업 디렉토리를 확인하세요",
        ],
        "en": [
            "Verify app/config/base.yaml exists",
            "Check the working directory",
        ],
    },
    "CONFIG-002": {
        "ko": [
            "YAML 설정 값의 타입을 확인하세요",
            "환경 변수 치환 결과를 확인하세요",
        ],
        "en": [
            "Check the types of YAML configuration values",
            "Check the result of environment variable substitution",
        ],
    },
    "CONFIG-003": {
        "ko": [
            "YAML 문법 오류가 없는지 확인하세요",
            "파일 권한을 확인하세요",
        ],
        "en": [
            "Check the YAML files for syntax errors",
            "Check file permissions",
        ],
    },
    # GENERAL (일반)
    "GENERAL-001": {
        "ko": [
            "서버 로그를 확인하여 자세한 오류를 파악하세요",
            "시스템 관리자에게 문의하세요",
        ],
        "en": [
            "Check server logs for detailed error information",
            "Contact system administrator",
        ],
    },
}


def get_message_template(error_code: str, lang: str = "ko") -> str:
    """에러 메시지 템플릿 가져오기.

    Args:
        error_code: 에러 코드 (예: "QUERY-001")
        lang: 언어 코드 ("ko" 또는 "en")

    Returns:
        에러 메시지 템플릿 문자열

    Raises:
        KeyError: 에러 코드가 존재하지 않는 경우
        ValueError: 지원하지 않는 언어 코드인 경우
    """
    if error_code not in ERROR_MESSAGES:
        raise KeyError(f"Unknown error code: {error_code}")

    if lang not in ("ko", "en"):
        raise ValueError(f"Unsupported language: {lang}")

    return ERROR_MESSAGES[error_code][lang]


def get_solutions_list(error_code: str, lang: str = "ko") -> list[str]:
    """에러 해결 방법 목록 가져오기.

    Args:
        error_code: 에러 코드 (예: "QUERY-001")
        lang: 언어 코드 ("ko" 또는 "en")

    Returns:
        에러 해결 방법 리스트

    Raises:
        KeyError: 에러 코드가 존재하지 않는 경우
        ValueError: 지원하지 않는 언어 코드인 경우
    """
    if error_code not in ERROR_SOLUTIONS:
        raise KeyError(f"Unknown error code: {error_code}")

    if lang not in ("ko", "en"):
        raise ValueError(f"Unsupported language: {lang}")

    return ERROR_SOLUTIONS[error_code][lang]
