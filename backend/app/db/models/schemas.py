# app/db/models/schemas.py
# 생성 엔드포인트 입출력 + 공통 응답 스키마
from __future__ import annotations
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

GENERATED_TITLE_FALLBACK = "Generated Recipe"

# # LLM 응답 파싱 결과 (저장하지 않음)
class GeneratedRecipe(BaseModel):
    title: str = GENERATED_TITLE_FALLBACK
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)   # 문장 단위 스텝
    originalResponse: str = ""                               # 디버깅용 원문

# # 에러/확인 메시지
class MessageOut(BaseModel):
    message: str

class ErrorOut(BaseModel):
    message: str
    details: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
