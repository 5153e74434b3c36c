"""Générateurs d'identifiants : share codes et clés de blob"""

import secrets
import string
import uuid

SHARE_CODE_LENGTH = 12
SHARE_CODE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits  # 62 symboles


def generate_share_code(length: int = SHARE_CODE_LENGTH) -> str:
    return ''.join(secrets.choice(SHARE_CODE_ALPHABET) for _ in range(length))


def new_blob_key(suffix: str) -> str:
    return f"{uuid.uuid4().hex}.{suffix}"
