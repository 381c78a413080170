"""
그래프 백엔드 구현체

- GremlinSession: aiohttp WebSocket 기반 Gremlin Server 세션
- graphson: GraphSON v3 응답 디코더
"""
from .graphson import decode, decode_result_data, to_plain
from .gremlin_session import GremlinServerError, GremlinSession, GremlinSessionFactory

__all__ = [
    "GremlinSession",
    "GremlinSessionFactory",
    "GremlinServerError",
    "decode",
    "decode_result_data",
    "to_plain",
]
