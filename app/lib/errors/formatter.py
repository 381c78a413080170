"""에러 메시지 포맷팅 유틸리티.

메시지 템플릿에 컨텍스트를 채우고, 요청 언어를 결정하고,
API 에러 응답 본문을 조립합니다.
"""

import os
from typing import Any

from app.lib.errors.messages import get_message_template, get_solutions_list

SUPPORTED_LANGUAGES = ("ko", "en")

# 메시지에 들어가는 컨텍스트 값 최대 길이 (긴 Gremlin 쿼리, 수백 개 ID 목록 등)
MAX_CONTEXT_VALUE_LENGTH = 200


class _TemplateContext(dict):
    """누락된 키는 `{key}` 그대로 남기는 포맷 컨텍스트"""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def _shorten(value: Any) -> Any:
    if isinstance(value, (int, float, bool)) or value is None:
        return value
    text = str(value)
    if len(text) > MAX_CONTEXT_VALUE_LENGTH:
        return text[:MAX_CONTEXT_VALUE_LENGTH] + "…"
    return text


def get_default_language() -> str:
    """ERROR_LANGUAGE 환경변수 (기본 "ko")"""
    lang = os.getenv("ERROR_LANGUAGE", "ko")
    return lang if lang in SUPPORTED_LANGUAGES else "ko"


def language_from_header(accept_language: str | None) -> str:
    """Accept-Language 헤더에서 지원 언어 선택.

    "en-US,en;q=0.9,ko;q=0.8" 처럼 q 값이 붙은 목록을 읽어
    지원 언어 중 가중치가 가장 높은 것을 고릅니다. 지원 언어가 없으면 기본 언어.

    Example:
        >>> language_from_header("ko;q=0.5, en-GB;q=0.8")
        'en'
    """
    if not accept_language:
        return get_default_language()

    best_lang: str | None = None
    best_quality = 0.0
    for part in accept_language.split(","):
        tag, _, params = part.strip().partition(";")
        primary = tag.strip().lower().split("-")[0]
        if primary not in SUPPORTED_LANGUAGES:
            continue

        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 0.0

        # 같은 가중치면 먼저 나온 언어 우선
        if quality > best_quality:
            best_lang, best_quality = primary, quality

    return best_lang or get_default_language()


def get_error_message(error_code: str, lang: str | None = None, **kwargs: Any) -> str:
    """에러 메시지 가져오기 (포맷팅 포함).

    컨텍스트가 부족하면 해당 자리표시자는 `{name}` 형태로 남습니다.

    Example:
        >>> get_error_message("EXEC-002", lang="en", timeout=30)
        'Query execution timed out (30s)'
    """
    template = get_message_template(error_code, lang or get_default_language())
    context = _TemplateContext((key, _shorten(value)) for key, value in kwargs.items())
    return template.format_map(context)


def get_error_solutions(error_code: str, lang: str | None = None) -> list[str]:
    return get_solutions_list(error_code, lang or get_default_language())


def format_error_response(
    error_code: str,
    lang: str | None = None,
    include_solutions: bool = True,
    **context: Any,
) -> dict[str, Any]:
    """에러 응답 JSON 생성.

    Returns:
        {"error_code", "message"} 와 include_solutions일 때 "solutions"
    """
    lang = lang or get_default_language()

    response: dict[str, Any] = {
        "error_code": error_code,
        "message": get_error_message(error_code, lang, **context),
    }
    if include_solutions:
        response["solutions"] = get_error_solutions(error_code, lang)

    return response
