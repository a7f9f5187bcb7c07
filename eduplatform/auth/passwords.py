import logging

import bcrypt

from eduplatform.core import config


logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = config.BCRYPT_ROUNDS
# bcrypt only looks at the first 72 bytes of the secret.
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_encode(password), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_encode(plain_password), hashed_password.encode('utf-8'))
    except ValueError:
        logger.warning('Stored password hash is malformed')
        return False
