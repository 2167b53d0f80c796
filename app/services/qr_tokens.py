from __future__ import annotations

import hashlib
import secrets

QR_TOKEN_BYTES = 32


def generate_qr_token() -> str:
    return secrets.token_urlsafe(QR_TOKEN_BYTES)


def hash_qr_token(token: str) -> str:
    return hashlib.sha256(token.strip().encode("utf-8")).hexdigest()
