"""
그래프 백엔드 세션 인터페이스 정의 (Protocol 기반)

runtime_checkable Protocol을 사용하여 duck typing을 지원합니다.
테스트에서는 스크립트된 가짜 세션으로 교체할 수 있습니다.
"""

from typing import Any, Protocol, runtime_checkable

from .models import GraphEndpoint


@runtime_checkable
class IGraphSession(Protocol):
    """
    단일 백엔드 세션 인터페이스

    파이프라인 단계마다 새 세션을 열고 닫습니다 (단계 간 재사용 금지).

    구현 예시:
    - GremlinSession: aiohttp WebSocket 기반 Gremlin Server 세션
    - FakeGraphSession: 테스트용 스크립트 세션
    """

    async def open(self) -> None:
        """세션 열기 (연결 실패 시 예외 발생)"""
        ...

    async def submit(self, query: str) -> list[Any]:
        """
        쿼리 문자열을 그대로 전송하고 결과 항목 리스트 반환

        Args:
            query: Gremlin 쿼리 (해석하지 않고 그대로 전달)

        Returns:
            디코딩된 결과 항목 리스트
        """
        ...

    async def close(self) -> None:
        """
        세션 닫기

        멱등이어야 하며, submit()이 진행 중일 때 호출해도 안전해야 합니다.
        (메인 쿼리 취소는 이 동작으로 실현됩니다)
        """
        ...


@runtime_checkable
class IGraphSessionFactory(Protocol):
    """
    세션 팩토리 인터페이스

    요청 간에 공유되는 유일한 자원이므로 동시 호출에 안전해야 합니다.
    """

    def create(self, endpoint: GraphEndpoint) -> IGraphSession:
        """엔드포인트에 대한 새 (아직 열리지 않은) 세션 생성"""
        ...
