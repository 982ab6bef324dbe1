# scripts/generate_recipe.py
# 터미널에서 레시피 생성 → JSON 출력 (--save면 recipes 컬렉션에 저장)
# 사용: python -m app.scripts.generate_recipe egg flour --diet vegetarian --save

import argparse
import asyncio
import json
from typing import List, Optional

from app.db.init import close_db, init_db
from app.services.generator import OpenAIRecipeGenerator, generate_recipe_text
from app.services.parser import generated_to_record_fields, parse_recipe_text
from app.services.recipe_store import MongoRecipeStore

def _args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a recipe from ingredients")
    p.add_argument("ingredients", nargs="+", help="ingredient names")
    p.add_argument("--diet", default=None, help="dietary restrictions (e.g. vegetarian)")
    p.add_argument("--save", action="store_true", help="persist the generated recipe")
    return p.parse_args(argv)

async def main(argv: Optional[List[str]] = None, llm=None, store=None) -> dict:
    args = _args(argv)
    llm = llm or OpenAIRecipeGenerator.from_settings()

    text = await generate_recipe_text(llm, args.ingredients, args.diet)
    generated = parse_recipe_text(text)
    out = {"generated": generated.model_dump()}

    if args.save:
        opened = store is None
        if opened:
            store = MongoRecipeStore.from_db(await init_db())
        try:
            saved = await store.create(generated_to_record_fields(generated))
            out["saved_id"] = saved.id
        finally:
            if opened:
                await close_db()

    print(json.dumps(out, ensure_ascii=False, indent=2))
    return out

if __name__ == "__main__":
    asyncio.run(main())
