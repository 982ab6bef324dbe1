# app/api/routes_recipes.py
# 레시피 CRUD + 재료 기반 레시피 생성(LLM)
# 라우터는 저장소/생성기 호출 1회 → 결과를 상태코드/JSON으로 변환만 한다

from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Dict, List
import logging

from fastapi import APIRouter, Body, Depends

from app.core.deps import get_recipe_generator, get_recipe_store
from app.core.errors import RecipeError, UpstreamError
from app.db.models.recipe import RecipeOut
from app.db.models.schemas import GeneratedRecipe, MessageOut
from app.services.generator import generate_recipe_text
from app.services.parser import parse_recipe_text

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes", tags=["recipes"])

@contextmanager
def _boundary(message: str):
    # 4xx/404는 그대로, 나머지는 전부 500으로 수렴
    try:
        yield
    except RecipeError:
        raise
    except Exception as e:
        log.exception(message)
        raise UpstreamError(message, cause=e) from e

# ------------------------------
# 엔드포인트: 생성 (저장하지 않음)
# /{rid}보다 먼저 선언
# ------------------------------

@router.post("/generate", response_model=GeneratedRecipe)
async def generate_recipe(
    body: Dict[str, Any] = Body(...),
    llm=Depends(get_recipe_generator),
):
    with _boundary("Failed to generate recipe"):
        text = await generate_recipe_text(llm, body.get("ingredients"), body.get("dietaryRestrictions"))
        recipe = parse_recipe_text(text)
    log.info("generated recipe title=%r ingredients=%d steps=%d",
             recipe.title, len(recipe.ingredients), len(recipe.instructions))
    return recipe

# ------------------------------
# 엔드포인트: CRUD
# ------------------------------

@router.get("", response_model=List[RecipeOut])
async def list_recipes(store=Depends(get_recipe_store)):
    with _boundary("Failed to fetch recipes"):
        return await store.list_all()

@router.get("/{rid}", response_model=RecipeOut)
async def get_recipe(rid: str, store=Depends(get_recipe_store)):
    with _boundary("Failed to fetch recipe"):
        return await store.get(rid)

@router.post("", response_model=RecipeOut, status_code=201)
async def create_recipe(body: Dict[str, Any] = Body(...), store=Depends(get_recipe_store)):
    with _boundary("Failed to create recipe"):
        recipe = await store.create(body)
    log.info("recipe created id=%s", recipe.id)
    return recipe

@router.put("/{rid}", response_model=RecipeOut)
async def update_recipe(rid: str, body: Dict[str, Any] = Body(...), store=Depends(get_recipe_store)):
    with _boundary("Failed to update recipe"):
        return await store.update(rid, body)

@router.delete("/{rid}", response_model=MessageOut)
async def delete_recipe(rid: str, store=Depends(get_recipe_store)):
    with _boundary("Failed to delete recipe"):
        await store.delete(rid)
    log.info("recipe deleted id=%s", rid)
    return {"message": "Recipe deleted successfully"}
