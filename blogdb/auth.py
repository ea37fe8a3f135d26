"""Session and identity management.

The session manager issues signed, expiring tokens bound to a user id,
validates them and resolves the current user. It talks to the store only
through :class:`~blogdb.interfaces.IIdentityDirectory`.

The manager remembers the last token it issued as its "current" credential;
``logout()`` forgets it. Callers holding a token of their own can pass it
explicitly to :meth:`SessionManager.current_user`.

Example:
    >>> sessions = SessionManager(store)
    >>> result = sessions.login("john@example.com", "password123")
    >>> result.ok
    True
    >>> sessions.current_user().username
    'johndoe'
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional

import jwt
from pydantic import BaseModel

from blogdb.config import Settings, settings as default_settings
from blogdb.interfaces import IIdentityDirectory
from blogdb.logging import bind_actor, clear_actor, logger
from blogdb.models import Outcome, PublicUser, Rejection, User, UserPatch
from blogdb.utils import redact_token, utc_now


class AuthSession(BaseModel):
    """An authenticated session.

    Attributes:
        user: The signed-in user (redacted)
        token: Signed session token
        expires_at: Token expiry (UTC)
    """

    user: PublicUser
    token: str
    expires_at: datetime


class SessionManager:
    """Issues and validates session tokens.

    Args:
        directory: Identity lookups (any entity store satisfies this)
        settings: Settings providing secret, algorithm, lifetime and password rules
        clock: Current time source (defaults to :func:`utc_now`)
    """

    def __init__(
        self,
        directory: IIdentityDirectory,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.directory = directory
        self.settings = settings or default_settings
        self.clock = clock or utc_now
        self.token: str | None = None

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    def _issue(self, user: User) -> AuthSession:
        expires_at = self.clock() + self.settings.session_ttl
        token = jwt.encode(
            {"sub": user.id, "exp": int(expires_at.timestamp())},
            self.settings.session_secret,
            algorithm=self.settings.session_algorithm,
        )
        self.token = token
        bind_actor(user.id)
        return AuthSession(user=user.to_public(), token=token, expires_at=expires_at)

    def decode_token(self, token: str | None) -> dict[str, Any] | None:
        """Decode a token if its signature is valid and it has not expired.

        Expiry is checked against this manager's clock rather than wall time.

        Returns:
            Token claims, or None for a missing, malformed, forged or expired token
        """
        if not token:
            return None
        try:
            claims = jwt.decode(
                token,
                self.settings.session_secret,
                algorithms=[self.settings.session_algorithm],
                options={"verify_exp": False, "require": ["sub", "exp"]},
            )
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected token {redact_token(token)}: {e}")
            return None

        if claims["exp"] <= self.clock().timestamp():
            logger.debug(f"Token {redact_token(token)} expired")
            return None
        return claims

    def validate_token(self, token: str | None) -> bool:
        return self.decode_token(token) is not None

    # -------------------------------------------------------------------------
    # Session operations
    # -------------------------------------------------------------------------

    def login(self, email: str, password: str) -> Outcome[AuthSession]:
        """Sign in with email and password.

        Unknown email and wrong password are indistinguishable to the caller.
        """
        user = self.directory.get_user_by_email(email)
        if user is None or user.password != password:
            logger.info("Login failed: invalid credentials")
            return Outcome.reject(Rejection.INVALID, "Invalid credentials")

        session = self._issue(user)
        logger.info(f"User {user.id} logged in")
        return Outcome.success(session)

    def register(
        self,
        username: str,
        email: str,
        password: str,
        profile_picture: str | None = None,
        bio: str | None = None,
    ) -> Outcome[AuthSession]:
        """Create an account and sign it in.

        Rejects a duplicate email with ``CONFLICT`` and a short password with
        ``INVALID``.
        """
        min_length = self.settings.min_password_length
        if len(password) < min_length:
            return Outcome.reject(
                Rejection.INVALID, f"Password must be at least {min_length} characters"
            )
        if self.directory.get_user_by_email(email) is not None:
            logger.info("Registration refused: email already in use")
            return Outcome.reject(Rejection.CONFLICT, "Email already in use")

        user = self.directory.create_user(
            {
                "username": username,
                "email": email,
                "password": password,
                "profile_picture": profile_picture,
                "bio": bio,
            }
        )
        logger.info(f"Registered user {user.id} ({username})")
        return Outcome.success(self._issue(user))

    def logout(self) -> None:
        """Forget the current token."""
        self.token = None
        clear_actor()
        logger.info("Logged out")

    def current_user(self, token: str | None = None) -> PublicUser | None:
        """Resolve the user behind ``token`` (or the current token).

        Returns None when there is no valid token or the user no longer exists.
        """
        claims = self.decode_token(token if token is not None else self.token)
        if claims is None:
            return None
        user = self.directory.get_user_by_id(claims["sub"])
        return user.to_public() if user else None

    def update_profile(self, user_id: str, patch: UserPatch) -> Outcome[PublicUser]:
        """Apply a profile patch to ``user_id``."""
        if patch.email is not None:
            holder = self.directory.get_user_by_email(patch.email)
            if holder is not None and holder.id != user_id:
                return Outcome.reject(Rejection.CONFLICT, "Email already in use")
        updated = self.directory.update_user(user_id, patch)
        if updated is None:
            return Outcome.reject(Rejection.NOT_FOUND, "User not found")
        return Outcome.success(updated.to_public())
