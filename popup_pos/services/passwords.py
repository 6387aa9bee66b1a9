from __future__ import annotations

import bcrypt

from popup_pos.core.config import PASSWORD_HASH_ROUNDS

BCRYPT_MAX_BYTES = 72


def _normalize_password_for_bcrypt(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes and newer releases reject longer input.
    pw = (password or "").encode("utf-8")
    if len(pw) <= BCRYPT_MAX_BYTES:
        return pw
    return pw[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    pw = _normalize_password_for_bcrypt(password)
    salt = bcrypt.gensalt(rounds=PASSWORD_HASH_ROUNDS)
    return bcrypt.hashpw(pw, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_normalize_password_for_bcrypt(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage.
        return False
