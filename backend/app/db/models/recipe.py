# 레시피 저장 스키마 + 쓰기 검증
# - 생성: title/ingredients/instructions 필수, ingredients는 반드시 배열
# - 수정: 보낸 필드만 덮어씀(부분 수정), 검증 규칙은 생성과 동일
from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional
from datetime import datetime

from pydantic import BaseModel, Field, ValidationError

from app.core.errors import ClientInputError, RecipeValidationError

REQUIRED_FIELDS = ("title", "ingredients", "instructions")
MUTABLE_FIELDS = ("title", "ingredients", "instructions", "image", "nutrition")

_REQUIRED_MESSAGES = {
    "title": "Title is required",
    "ingredients": "Ingredients are required",
    "instructions": "Instructions are required",
}
INGREDIENTS_NOT_ARRAY = "Ingredients must be an array"

class Nutrition(BaseModel):
    calories: float = 0
    protein: float = 0
    fat: float = 0
    carbohydrates: float = 0

class RecipeIn(BaseModel):
    title: str
    ingredients: List[str]
    instructions: str
    image: str = ""
    nutrition: Nutrition = Field(default_factory=Nutrition)

class RecipePatch(BaseModel):
    title: Optional[str] = None
    ingredients: Optional[List[str]] = None
    instructions: Optional[str] = None
    image: Optional[str] = None
    nutrition: Optional[Nutrition] = None

# 응답용 (id는 _id 문자열)
class RecipeOut(BaseModel):
    id: str
    title: str = ""
    ingredients: List[str] = Field(default_factory=list)
    instructions: str = ""
    image: str = ""
    nutrition: Nutrition = Field(default_factory=Nutrition)
    createdAt: Optional[datetime] = None

def to_recipe_out(doc: Mapping[str, Any]) -> RecipeOut:
    return RecipeOut(
        id=str(doc.get("_id") or doc.get("id") or ""),
        title=doc.get("title") or "",
        ingredients=[str(x) for x in (doc.get("ingredients") or [])],
        instructions=doc.get("instructions") or "",
        image=doc.get("image") or "",
        nutrition=Nutrition(**(doc.get("nutrition") or {})),
        createdAt=doc.get("createdAt"),
    )

def _is_blank(v: Any) -> bool:
    return v is None or v == "" or v == []

def _error_details(e: ValidationError) -> Dict[str, str]:
    # pydantic 에러 → {"nutrition.calories": "..."} 형태
    out: Dict[str, str] = {}
    for err in e.errors():
        key = ".".join(str(p) for p in err.get("loc", ())) or "body"
        out.setdefault(key, err.get("msg", "invalid value"))
    return out

def _check_ingredients_type(payload: Mapping[str, Any]) -> None:
    if "ingredients" in payload and payload["ingredients"] is not None \
            and not isinstance(payload["ingredients"], list):
        raise ClientInputError(INGREDIENTS_NOT_ARRAY, details={"ingredients": INGREDIENTS_NOT_ARRAY})

def validate_new_recipe(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """생성 payload 검증 → DB에 넣을 필드 dict (createdAt 제외)"""
    missing = {f: _REQUIRED_MESSAGES[f] for f in REQUIRED_FIELDS if _is_blank(payload.get(f))}
    if missing:
        raise RecipeValidationError("Missing required fields", details=missing)

    _check_ingredients_type(payload)

    fields = {k: payload[k] for k in MUTABLE_FIELDS if k in payload and payload[k] is not None}
    try:
        recipe = RecipeIn.model_validate(fields)
    except ValidationError as e:
        raise RecipeValidationError("Validation failed", details=_error_details(e)) from e
    return recipe.model_dump()

def validate_recipe_changes(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """수정 payload 검증 → $set에 넣을 필드 dict (보낸 필드만)"""
    _check_ingredients_type(payload)

    sent = {k: payload[k] for k in MUTABLE_FIELDS if k in payload}

    # 필수 필드를 비우는 수정은 거부
    blanked = {f: _REQUIRED_MESSAGES[f] for f in REQUIRED_FIELDS if f in sent and _is_blank(sent[f])}
    if blanked:
        raise RecipeValidationError("Validation failed", details=blanked)

    try:
        patch = RecipePatch.model_validate(sent)
    except ValidationError as e:
        raise RecipeValidationError("Validation failed", details=_error_details(e)) from e

    changes = patch.model_dump(exclude_unset=True)
    # null로 보낸 선택 필드는 기본값으로
    if "image" in changes and changes["image"] is None:
        changes["image"] = ""
    # nutrition은 통째로 교체 (빠진 값은 0)
    if "nutrition" in changes:
        changes["nutrition"] = (patch.nutrition or Nutrition()).model_dump()
    return changes
