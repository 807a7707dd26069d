from __future__ import annotations

import bcrypt

from app.core.config import settings


def hash_password(password: str) -> str:
    rounds = max(4, min(int(settings.AUTH_BCRYPT_ROUNDS), 16))
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
