"""에러 코드 정의 모듈.

Graph Explorer API의 모든 에러 코드를 Enum으로 정의합니다.
도메인별로 그룹화되어 있어 에러 분류 및 추적이 용이합니다.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Graph Explorer 에러 코드 Enum.

    형식: {DOMAIN}-{NUMBER}
    - QUERY: 요청 입력 (클라이언트 오류)
    - CONN: 그래프 백엔드 연결
    - EXEC: 메인 쿼리 실행
    - ENRICH: 보강 단계 (갭 보충, 자동 연결, 속성 보강) - 호출자에게 노출되지 않음
    - CONFIG: 설정 관리
    - GENERAL: 일반 오류
    """

    # QUERY (요청 입력) - 3개
    QUERY_001 = "QUERY-001"  # query 필드 누락 또는 공백
    QUERY_002 = "QUERY-002"  # 지원하지 않는 백엔드 유형
    QUERY_003 = "QUERY-003"  # 요청 본문 형식 오류

    # CONN (백엔드 연결) - 2개
    CONN_001 = "CONN-001"  # 세션 열기 실패
    CONN_002 = "CONN-002"  # 연결 타임아웃

    # EXEC (쿼리 실행) - 3개
    EXEC_001 = "EXEC-001"  # 서버 측 쿼리 실행 오류
    EXEC_002 = "EXEC-002"  # 쿼리 실행 타임아웃
    EXEC_003 = "EXEC-003"  # 클라이언트 연결 종료로 쿼리 취소

    # ENRICH (보강 단계) - 1개
    ENRICH_001 = "ENRICH-001"  # 보강 단계 실패 (로그만 남김)

    # CONFIG (설정) - 3개
    CONFIG_001 = "CONFIG-001"  # 설정 파일 없음
    CONFIG_002 = "CONFIG-002"  # 설정 검증 실패
    CONFIG_003 = "CONFIG-003"  # 설정 로드 실패

    # GENERAL (일반) - 1개
    GENERAL_001 = "GENERAL-001"  # 예상하지 못한 오류
