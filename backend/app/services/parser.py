# app/services/parser.py
# LLM 자유 텍스트 → {title, ingredients[], instructions[]}
# - Title: / Ingredients: / Instructions: 마커 기준 (generator.build_prompt와 짝)
# - 어떤 입력이든 예외 없이 기본값으로 수렴 (마커 없으면 빈 배열/기본 제목)

from __future__ import annotations
from typing import Any, Dict, List
import re

from app.db.models.schemas import GeneratedRecipe, GENERATED_TITLE_FALLBACK

TITLE_RE        = re.compile(r"Title:\s*(.+?)(?=\n|$)", re.I)
INGREDIENTS_RE  = re.compile(r"Ingredients:(.*?)(?=Instructions:|\Z)", re.I | re.S)
INSTRUCTIONS_RE = re.compile(r"Instructions:(.*)", re.I | re.S)

ING_MARKER_RE  = re.compile(r"^[-•*\d]+\.?\s*")   # "- ", "• ", "1. ", "**"
STEP_MARKER_RE = re.compile(r"^\d+\.?\s*")        # "1. ", "2 "
SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")   # 종결부호 뒤 공백에서만 자름

def _clean_lines(block: str, marker: re.Pattern) -> List[str]:
    out: List[str] = []
    for line in block.strip().splitlines():
        s = marker.sub("", line.strip()).strip()
        if s:
            out.append(s)
    return out

def split_sentences(line: str) -> List[str]:
    # 종결부호(.!?)는 앞 문장에 붙여서 자름, 부호 없으면 한 덩어리
    parts = SENTENCE_END_RE.split(line)
    return [p.strip() for p in parts if p.strip()]

def extract_title(text: str) -> str:
    m = TITLE_RE.search(text)
    title = m.group(1).strip() if m else ""
    return title or GENERATED_TITLE_FALLBACK

def extract_ingredients(text: str) -> List[str]:
    m = INGREDIENTS_RE.search(text)
    if not m:
        return []
    return _clean_lines(m.group(1), ING_MARKER_RE)

def extract_instructions(text: str) -> List[str]:
    m = INSTRUCTIONS_RE.search(text)
    if not m:
        return []
    steps: List[str] = []
    for line in _clean_lines(m.group(1), STEP_MARKER_RE):
        steps.extend(split_sentences(line))
    return steps

def parse_recipe_text(text: str | None) -> GeneratedRecipe:
    text = text if isinstance(text, str) else ""
    return GeneratedRecipe(
        title=extract_title(text),
        ingredients=extract_ingredients(text),
        instructions=extract_instructions(text),
        originalResponse=text,
    )

def generated_to_record_fields(generated: GeneratedRecipe) -> Dict[str, Any]:
    """생성 결과 → 저장용 payload. 저장 스키마의 instructions는 단일 텍스트라 줄바꿈으로 합친다."""
    return {
        "title": generated.title,
        "ingredients": list(generated.ingredients),
        "instructions": "\n".join(generated.instructions),
    }
