# app/core/errors.py
# 요청 경계에서 쓰는 에러 분류 — 라우터는 이 예외만 던지고, main.py 핸들러가 JSON으로 변환
# - 4xx: 호출자가 고칠 수 있는 입력 문제 (재시도 없음)
# - 5xx: DB/LLM 등 업스트림 장애 (production에서는 상세 숨김)

from __future__ import annotations
from typing import Any, Dict, Optional

INTERNAL_ERROR = "Internal server error"


class RecipeError(Exception):
    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.cause = cause

    def to_body(self, production: bool = False) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ClientInputError(RecipeError):
    # 잘못된 id, 타입 불일치, 빈 재료 목록 등
    status_code = 400


class RecipeValidationError(ClientInputError):
    # 스키마 위반 — details에 필드별 문제를 담는다
    pass


class NotFoundError(RecipeError):
    status_code = 404


class UpstreamError(RecipeError):
    # DB 연결 실패, 생성 API 실패
    status_code = 500

    def to_body(self, production: bool = False) -> Dict[str, Any]:
        body = super().to_body(production)
        if production:
            body["error"] = INTERNAL_ERROR
        else:
            body["error"] = str(self.cause) if self.cause is not None else self.message
        return body
