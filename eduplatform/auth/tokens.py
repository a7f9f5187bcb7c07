"""Access token issuance for sign-in.

A user keeps at most one stored token. Signing in again while that token is
still valid returns it unchanged instead of signing a new one; an expired or
unreadable token is deleted and replaced. Stale tokens are only evicted here,
on the owner's next sign-in.
"""

import logging

from sqlalchemy.exc import IntegrityError

from eduplatform.auth import jwt_handler
from eduplatform.auth.jwt_handler import TokenStatus
from eduplatform.models.user import User
from eduplatform.repositories.tokens import TokenRepository

logger = logging.getLogger(__name__)


def reuse_stored_token(user: User, tokens: TokenRepository) -> str | None:
    stored = tokens.get_by_user(user.id)
    if stored is None:
        return None

    token_status = jwt_handler.verify_access_token(stored.jwt)
    if token_status is TokenStatus.VALID:
        return stored.jwt

    if token_status is TokenStatus.EXPIRED:
        logger.info('Removing expired token of user %s', user.id)
    else:
        logger.warning('Stored token of user %s failed verification, replacing it', user.id)
    tokens.delete(stored.id)
    return None


def issue_token(user: User, username: str, tokens: TokenRepository) -> str:
    """Return the user's live token, signing and storing a new one if needed.

    Args:
        user: The authenticated user.
        username: The login or email the user signed in with; it is embedded
            in the token and resolved back to the user on each request.
        tokens: Token storage.

    Returns:
        The encoded JWT.
    """
    existing = reuse_stored_token(user, tokens)
    if existing is not None:
        return existing

    token = jwt_handler.create_access_token(username=username, role=user.role_name)
    try:
        tokens.insert(user.id, token)
    except IntegrityError:
        # A concurrent sign-in of the same user stored its token first.
        winner = tokens.get_by_user(user.id)
        if winner is None:
            raise
        logger.info('Concurrent sign-in of user %s, reusing the stored token', user.id)
        return winner.jwt

    logger.info('Issued a new token for user %s', user.id)
    return token
