# app/main.py
# FastAPI 앱 초기화 및 라우터 설정
# DB 커넥션/LLM 클라이언트는 시작 시 1회 만들어 app.state에 올린다 (라우터는 의존성으로 받음)

from __future__ import annotations

import logging
from asyncio import sleep

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from app.api.routes_recipes import router as recipes_router
from app.core.config import settings
from app.core.errors import INTERNAL_ERROR, RecipeError
from app.db.indexes import ensure_indexes
from app.db.init import close_db, get_db, init_db
from app.services.generator import OpenAIRecipeGenerator
from app.services.recipe_store import MongoRecipeStore

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
log = logging.getLogger(__name__)

LIVENESS_TEXT = "AI-Powered Recipe Recommender Backend is Running"

app = FastAPI(title="AI Recipe Recommender - API", version="0.1.0")

# CORS: 기본은 전체 허용 (CORS_ORIGINS로 제한)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------------
# 에러 → JSON {message, details?, error?}
# ------------------------------

@app.exception_handler(RecipeError)
async def recipe_error_handler(request: Request, exc: RecipeError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(settings.is_production))

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = {}
    for err in exc.errors():
        key = ".".join(str(p) for p in err.get("loc", ())) or "body"
        details.setdefault(key, err.get("msg", "invalid value"))
    return JSONResponse(status_code=400, content={"message": "Invalid request body", "details": details})

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "message": "Internal server error",
            "error": INTERNAL_ERROR if settings.is_production else str(exc),
        },
    )

# 앱 시작/종료 이벤트 핸들러
@app.on_event("startup")
async def on_startup() -> None:
    log.info("starting in %s mode", settings.APP_ENV)
    app.state.recipe_generator = OpenAIRecipeGenerator.from_settings()
    if not settings.OPENAI_API_KEY:
        log.warning("OPENAI_API_KEY not set; /api/recipes/generate will fail")

    # 1) DB 먼저 붙는다 (최대 20회, 1초 간격)
    db = None
    for i in range(20):
        try:
            db = await init_db()
            log.info("db ready (%s)", settings.MONGO_DB)
            break
        except Exception as e:
            log.warning("db init retry %d: %s", i + 1, e)
            await sleep(1.0)
    if db is None:
        log.error("db init failed after retries")
        return

    # 2) 인덱스 보장
    try:
        await ensure_indexes(db)
        log.info("indexes ensured")
    except Exception as e:
        log.warning("ensure_indexes failed: %s", e)

    app.state.recipe_store = MongoRecipeStore.from_db(db)

@app.on_event("shutdown")
async def on_shutdown() -> None:
    gen = getattr(app.state, "recipe_generator", None)
    if gen is not None:
        try:
            await gen.aclose()
        except Exception as e:
            log.warning("generator close failed: %s", e)
    # 몽고db 커넥션 정리
    await close_db()

@app.get("/", response_class=PlainTextResponse)
async def root():
    return LIVENESS_TEXT

@app.get("/health")
async def health():
    # DB ping 결과 포함
    ok = {"status": "ok", "db": "skip"}
    try:
        db = get_db()
    except RuntimeError:
        return ok
    try:
        await db.command("ping")
        ok["db"] = "ok"
    except Exception as e:
        ok["db"] = f"error: {e}"
    return ok

app.include_router(recipes_router)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)
