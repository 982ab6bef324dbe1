# 환경변수 로딩 (.env)
from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"  # 필요 시 prod/staging로 분리
    MONGO_DB: str = "recipes"

    # 레시피 생성(LLM)
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = 0.7

    # production이면 500 응답에서 원본 에러 문구를 숨김
    APP_ENV: str = "development"
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    PORT: int = 5000

    class Config:
        env_file = ".env"

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.strip().lower() == "production"

settings = Settings()
