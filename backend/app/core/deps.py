# 공용 의존성 — 스타트업에서 app.state에 올린 저장소/생성기를 라우터로 전달
# 테스트에서는 app.dependency_overrides로 교체
from fastapi import Request

from app.core.errors import UpstreamError

def get_recipe_store(request: Request):
    store = getattr(request.app.state, "recipe_store", None)
    if store is None:
        raise UpstreamError("Database is not available", cause=RuntimeError("MongoDB is not initialized yet."))
    return store

def get_recipe_generator(request: Request):
    gen = getattr(request.app.state, "recipe_generator", None)
    if gen is None:
        raise UpstreamError("Recipe generator is not available", cause=RuntimeError("generator is not initialized yet."))
    return gen
