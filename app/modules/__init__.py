"""
Modules package initialization

이 패키지는 Graph Explorer의 핵심 모듈을 포함합니다:
- core.graph: 그래프 결과 조정 파이프라인
"""
