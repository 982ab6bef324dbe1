# app/services/recipe_store.py
# 레시피 CRUD — motor 컬렉션 위의 얇은 저장소
# - id는 조회 전에 ObjectId 문법부터 검사 (잘못된 형식은 404가 아니라 400)
# - 수정은 보낸 필드만 $set, 결과는 수정 후 문서

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Protocol
from datetime import datetime, timezone

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.core.errors import ClientInputError, NotFoundError
from app.db.models.recipe import (
    RecipeOut,
    to_recipe_out,
    validate_new_recipe,
    validate_recipe_changes,
)

COLLECTION = "recipes"
INVALID_ID = "Invalid recipe ID format"
NOT_FOUND = "Recipe not found"


class RecipeStore(Protocol):
    async def create(self, payload: Mapping[str, Any]) -> RecipeOut: ...
    async def list_all(self) -> List[RecipeOut]: ...
    async def get(self, rid: str) -> RecipeOut: ...
    async def update(self, rid: str, payload: Mapping[str, Any]) -> RecipeOut: ...
    async def delete(self, rid: str) -> None: ...


def parse_recipe_id(rid: str) -> ObjectId:
    if not isinstance(rid, str) or not ObjectId.is_valid(rid):
        raise ClientInputError(INVALID_ID)
    return ObjectId(rid)


class MongoRecipeStore:
    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self.col = collection

    @classmethod
    def from_db(cls, db: AsyncIOMotorDatabase) -> "MongoRecipeStore":
        return cls(db[COLLECTION])

    async def create(self, payload: Mapping[str, Any]) -> RecipeOut:
        doc: Dict[str, Any] = validate_new_recipe(payload)
        doc["createdAt"] = datetime.now(timezone.utc)
        result = await self.col.insert_one(doc)
        # 저장된 그대로(ms 정밀도) 돌려주기 위해 재조회
        saved = await self.col.find_one({"_id": result.inserted_id})
        return to_recipe_out(saved or {**doc, "_id": result.inserted_id})

    async def list_all(self) -> List[RecipeOut]:
        docs = await self.col.find({}).to_list(length=None)
        return [to_recipe_out(d) for d in docs]

    async def get(self, rid: str) -> RecipeOut:
        oid = parse_recipe_id(rid)
        doc = await self.col.find_one({"_id": oid})
        if not doc:
            raise NotFoundError(NOT_FOUND)
        return to_recipe_out(doc)

    async def update(self, rid: str, payload: Mapping[str, Any]) -> RecipeOut:
        oid = parse_recipe_id(rid)
        changes = validate_recipe_changes(payload)
        if not changes:
            return await self.get(rid)

        doc = await self.col.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise NotFoundError(NOT_FOUND)
        return to_recipe_out(doc)

    async def delete(self, rid: str) -> None:
        oid = parse_recipe_id(rid)
        result = await self.col.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFoundError(NOT_FOUND)
