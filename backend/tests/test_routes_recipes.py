import pytest
from bson import ObjectId

from app.core.config import settings
from conftest import StubGenerator
from app.core.deps import get_recipe_generator
from app.main import app

INVALID_IDS = ["123", "not-an-id", "zzzzzzzzzzzzzzzzzzzzzzzz"]


def test_liveness(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.text == "AI-Powered Recipe Recommender Backend is Running"


def test_create_then_get(client, payload):
    res = client.post("/api/recipes", json=payload)
    assert res.status_code == 201
    created = res.json()
    assert created["title"] == payload["title"]
    assert created["ingredients"] == payload["ingredients"]
    assert created["nutrition"] == {"calories": 520, "protein": 18.5, "fat": 0, "carbohydrates": 0}
    assert created["createdAt"]

    res = client.get(f"/api/recipes/{created['id']}")
    assert res.status_code == 200
    assert res.json() == created


def test_list_recipes(client, payload):
    assert client.get("/api/recipes").json() == []
    client.post("/api/recipes", json=payload)
    res = client.get("/api/recipes")
    assert res.status_code == 200
    assert [r["title"] for r in res.json()] == ["Tomato Pasta"]


@pytest.mark.parametrize("rid", INVALID_IDS)
def test_invalid_id_is_400_everywhere(client, rid):
    assert client.get(f"/api/recipes/{rid}").status_code == 400
    assert client.put(f"/api/recipes/{rid}", json={"title": "x"}).status_code == 400
    res = client.delete(f"/api/recipes/{rid}")
    assert res.status_code == 400
    assert res.json() == {"message": "Invalid recipe ID format"}


def test_unknown_id_is_404(client):
    rid = str(ObjectId())
    assert client.get(f"/api/recipes/{rid}").status_code == 404
    assert client.put(f"/api/recipes/{rid}", json={"title": "x"}).status_code == 404
    res = client.delete(f"/api/recipes/{rid}")
    assert res.status_code == 404
    assert res.json() == {"message": "Recipe not found"}


@pytest.mark.parametrize("field", ["title", "ingredients", "instructions"])
def test_create_missing_field(client, payload, field):
    body = {k: v for k, v in payload.items() if k != field}
    res = client.post("/api/recipes", json=body)
    assert res.status_code == 400
    assert res.json()["message"] == "Missing required fields"
    assert list(res.json()["details"]) == [field]


def test_create_scalar_ingredients(client, payload):
    res = client.post("/api/recipes", json={**payload, "ingredients": "tomato"})
    assert res.status_code == 400
    assert res.json()["message"] == "Ingredients must be an array"


def test_create_wrong_types(client, payload):
    res = client.post("/api/recipes", json={**payload, "title": 42})
    assert res.status_code == 400
    assert res.json()["message"] == "Validation failed"
    assert "title" in res.json()["details"]


def test_non_object_body_is_400(client):
    res = client.post("/api/recipes", json=["not", "an", "object"])
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid request body"


def test_update_partial(client, payload):
    rid = client.post("/api/recipes", json=payload).json()["id"]
    res = client.put(f"/api/recipes/{rid}", json={"image": "", "nutrition": {"calories": 300}})
    assert res.status_code == 200
    body = res.json()
    assert body["image"] == ""
    assert body["nutrition"] == {"calories": 300, "protein": 0, "fat": 0, "carbohydrates": 0}
    assert body["title"] == payload["title"]


def test_update_scalar_ingredients(client, payload):
    rid = client.post("/api/recipes", json=payload).json()["id"]
    res = client.put(f"/api/recipes/{rid}", json={"ingredients": "tomato"})
    assert res.status_code == 400
    assert res.json()["message"] == "Ingredients must be an array"


def test_delete_then_get(client, payload):
    rid = client.post("/api/recipes", json=payload).json()["id"]
    res = client.delete(f"/api/recipes/{rid}")
    assert res.status_code == 200
    assert res.json() == {"message": "Recipe deleted successfully"}
    assert client.get(f"/api/recipes/{rid}").status_code == 404


class BrokenStore:
    async def list_all(self):
        raise ConnectionError("mongo unreachable")


def test_store_failure_is_500_with_detail(client, monkeypatch):
    from app.core.deps import get_recipe_store

    app.dependency_overrides[get_recipe_store] = lambda: BrokenStore()
    monkeypatch.setattr(settings, "APP_ENV", "development")
    res = client.get("/api/recipes")
    assert res.status_code == 500
    assert res.json() == {"message": "Failed to fetch recipes", "error": "mongo unreachable"}


def test_store_failure_hides_detail_in_production(client, monkeypatch):
    from app.core.deps import get_recipe_store

    app.dependency_overrides[get_recipe_store] = lambda: BrokenStore()
    monkeypatch.setattr(settings, "APP_ENV", "production")
    res = client.get("/api/recipes")
    assert res.status_code == 500
    assert res.json() == {"message": "Failed to fetch recipes", "error": "Internal server error"}


# ------------------------------
# generate
# ------------------------------

def test_generate(client, generator, store):
    res = client.post(
        "/api/recipes/generate",
        json={"ingredients": ["egg", "flour"], "dietaryRestrictions": "vegetarian"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["title"] == "Fluffy Egg Pancakes"
    assert body["ingredients"] == ["2 eggs", "1 cup flour", "pinch of salt"]
    assert body["instructions"] == ["Whisk the eggs.", "Fold in the flour.", "Cook on a hot pan until golden!"]
    assert body["originalResponse"] == generator.text

    assert len(generator.prompts) == 1
    assert "egg, flour" in generator.prompts[0]
    assert "vegetarian" in generator.prompts[0]

    # 생성 결과는 저장하지 않는다
    assert client.get("/api/recipes").json() == []


@pytest.mark.parametrize("body", [{}, {"ingredients": []}, {"ingredients": "egg"}, {"ingredients": ["  "]}])
def test_generate_requires_ingredients(client, generator, body):
    res = client.post("/api/recipes/generate", json=body)
    assert res.status_code == 400
    assert res.json() == {"message": "Please provide a non-empty array of ingredients"}
    assert generator.prompts == []


def test_generate_unstructured_answer_uses_defaults(client, generator):
    generator.text = "Sorry, I can only talk about the weather."
    res = client.post("/api/recipes/generate", json={"ingredients": ["egg"]})
    assert res.status_code == 200
    assert res.json()["title"] == "Generated Recipe"
    assert res.json()["ingredients"] == []
    assert res.json()["instructions"] == []


def test_generate_upstream_failure_is_500(client, monkeypatch):
    app.dependency_overrides[get_recipe_generator] = lambda: StubGenerator(error=RuntimeError("quota exceeded"))
    monkeypatch.setattr(settings, "APP_ENV", "development")
    res = client.post("/api/recipes/generate", json={"ingredients": ["egg"]})
    assert res.status_code == 500
    assert res.json() == {"message": "Failed to generate recipe", "error": "quota exceeded"}
