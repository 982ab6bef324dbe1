# 컬렉션 인덱스 생성
# 앱 스타트업에서 한 번 ensure_indexes(db)를 await로 호출한다.

from app.services.recipe_store import COLLECTION

async def ensure_indexes(db):
    col = db[COLLECTION]

    # 목록 최신순 정렬 / 제목 검색 대비
    await col.create_index([("createdAt", -1)], name="createdAt_-1")
    await col.create_index([("title", 1)], name="title_1")
