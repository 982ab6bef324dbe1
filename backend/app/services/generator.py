# app/services/generator.py
# 재료 + 식이 제한 → 프롬프트 → OpenAI Chat Completions → 원문 텍스트
# - 프롬프트의 Title:/Ingredients:/Instructions: 마커는 parser.py와 계약 (바꾸면 파싱 깨짐)
# - 업스트림 실패는 재시도 없이 그대로 올린다 (라우터에서 500 처리)

from __future__ import annotations
import logging
from typing import Any, List, Optional

from openai import AsyncOpenAI

from app.core.config import settings
from app.core.errors import ClientInputError

log = logging.getLogger(__name__)

EMPTY_INGREDIENTS = "Please provide a non-empty array of ingredients"


class GenerationNotReady(Exception):
    # 생성 기능 준비 미완(키 없음)
    pass


def build_prompt(ingredients: List[str], dietary_restrictions: Optional[str] = None) -> str:
    restrictions = (dietary_restrictions or "").strip() or "none"
    return (
        f"Generate a recipe using the following ingredients: {', '.join(ingredients)}.\n"
        f"Ensure it adheres to these dietary restrictions: {restrictions}.\n"
        "Please format your response with clear sections as follows:\n"
        "Title: [recipe title]\n"
        "Ingredients:\n"
        "- [ingredient 1]\n"
        "- [ingredient 2]\n"
        "...\n"
        "Instructions:\n"
        "1. [step 1]\n"
        "2. [step 2]\n"
        "..."
    )


class OpenAIRecipeGenerator:
    """
    프롬프트 한 개 → 텍스트 한 덩어리.
    - client를 넘기면 그대로 사용 (테스트/다른 엔드포인트용)
    - 키가 없으면 호출 시점에 GenerationNotReady
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        client: Any = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self._client = client

    @classmethod
    def from_settings(cls) -> "OpenAIRecipeGenerator":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            temperature=settings.OPENAI_TEMPERATURE,
        )

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.api_key:
                raise GenerationNotReady("OPENAI_API_KEY not set")
            self._client = AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def complete(self, prompt: str) -> str:
        client = self._get_client()
        chat = await client.chat.completions.create(
            model=self.model,
            temperature=self.temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        text = chat.choices[0].message.content if chat and chat.choices else ""
        if not text:
            raise RuntimeError("generation service returned an empty response")
        return text

    async def aclose(self) -> None:
        if self._client is not None and hasattr(self._client, "close"):
            await self._client.close()


def _normalize_ingredients(ingredients: Any) -> List[str]:
    if not isinstance(ingredients, list) or not ingredients:
        raise ClientInputError(EMPTY_INGREDIENTS)
    names = [str(x).strip() for x in ingredients if x is not None and str(x).strip()]
    if not names:
        raise ClientInputError(EMPTY_INGREDIENTS)
    return names


async def generate_recipe_text(llm: Any, ingredients: Any, dietary_restrictions: Any = None) -> str:
    """입력 검증 후 업스트림 호출. 검증 실패는 업스트림에 닿기 전에 ClientInputError."""
    names = _normalize_ingredients(ingredients)
    restrictions = dietary_restrictions if isinstance(dietary_restrictions, str) else None
    prompt = build_prompt(names, restrictions)
    log.info("generate recipe ingredients=%s restrictions=%s", names, restrictions or "none")
    return await llm.complete(prompt)
