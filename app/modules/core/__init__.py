"""Core graph modules.

이 패키지는 그래프 결과 조정 파이프라인을 구성하는 모듈을 포함합니다:
- graph: 식별자 정규화, 분류, 조립, 보충/연결/보강 단계, Gremlin 백엔드 세션
"""
