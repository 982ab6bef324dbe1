import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.core.deps import get_recipe_generator, get_recipe_store
from app.main import app
from app.services.recipe_store import MongoRecipeStore

WELL_FORMED = (
    "Title: Fluffy Egg Pancakes\n"
    "Ingredients:\n"
    "- 2 eggs\n"
    "- 1 cup flour\n"
    "- pinch of salt\n"
    "Instructions:\n"
    "1. Whisk the eggs. Fold in the flour.\n"
    "2. Cook on a hot pan until golden!\n"
)


class StubGenerator:
    """업스트림 대신 고정 텍스트를 돌려주는 생성기"""

    def __init__(self, text: str = WELL_FORMED, error: Exception | None = None):
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def store() -> MongoRecipeStore:
    return MongoRecipeStore(AsyncMongoMockClient()["recipes_test"]["recipes"])


@pytest.fixture
def generator() -> StubGenerator:
    return StubGenerator()


@pytest.fixture
def client(store, generator):
    app.dependency_overrides[get_recipe_store] = lambda: store
    app.dependency_overrides[get_recipe_generator] = lambda: generator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def payload() -> dict:
    return {
        "title": "Tomato Pasta",
        "ingredients": ["pasta", "tomato", "basil"],
        "instructions": "Boil pasta.\nAdd sauce.",
        "image": "https://example.com/pasta.jpg",
        "nutrition": {"calories": 520, "protein": 18.5},
    }
