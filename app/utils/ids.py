"""Identifier generation helpers."""

from __future__ import annotations

import secrets
import string

from app.utils.validators import normalize_code

_CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_PREFIX_LEN = 6
CODE_SUFFIX_LEN = 4


def random_suffix(length: int = CODE_SUFFIX_LEN) -> str:
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


def new_affiliate_code(name: str) -> str:
    """Referral code: up to six letters of the name plus a random suffix.

    "José Souza" -> "JOSESO" + "4K2Q".
    """
    prefix = normalize_code(name)[:CODE_PREFIX_LEN]
    return f"{prefix}{random_suffix()}"
