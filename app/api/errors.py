from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException

from app.core.errors import RBACError


def raise_http_error(exc: RBACError) -> NoReturn:
    raise HTTPException(status_code=exc.status_code, detail=exc.to_detail()) from exc
