"""Account Service — registration and login against the shared ledger document.

Invariants:
    - Raw passwords are hashed/verified with bcrypt outside the document write gate
    - A failed login changes nothing; a successful one updates last_login in one unit of work
    - Unknown email and wrong password produce the same InvalidCredentialsError

Design Decisions:
    - bcrypt calls run in a worker thread (they are CPU-bound, ~100ms each)
    - Passwords over 72 bytes rejected up front (bcrypt input limit)
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

import bcrypt

from app.core import accounts
from app.core.document import UserRecord
from app.core.errors import InvalidCredentialsError, ValidationError
from app.infrastructure.document_store import DocumentStore
from app.services.goal_ledger_service import utc_now

logger = logging.getLogger(__name__)

_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or oversized input
        return False


class AccountService:
    """Account directory operations."""

    def __init__(
        self,
        store: DocumentStore,
        min_password_length: int = 6,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.min_password_length = min_password_length
        self.clock = clock

    async def register(self, name: str, email: str, password: str) -> UserRecord:
        clean_name, clean_email = accounts.validate_registration(
            name, email, password, self.min_password_length,
        )
        if len(password.encode("utf-8")) > _BCRYPT_MAX_BYTES:
            raise ValidationError(
                f"Password must be at most {_BCRYPT_MAX_BYTES} bytes", field="password",
            )
        password_hash = await asyncio.to_thread(hash_password, password)
        now = self.clock()
        user = await self.store.with_document(
            lambda doc: accounts.register(doc, clean_name, clean_email, password_hash, now),
        )
        logger.info("User registered", extra={"owner_id": user.id})
        return user

    async def authenticate(self, email: str, password: str) -> UserRecord:
        if not email or not password:
            raise ValidationError("Email and password are required", field="email")
        document = await self.store.read_document()
        user = document.find_user_by_email(accounts.normalize_email(email))
        if user is None or not await asyncio.to_thread(
            verify_password, password, user.password_hash,
        ):
            logger.warning("Login rejected")
            raise InvalidCredentialsError()
        now = self.clock()
        user = await self.store.with_document(
            lambda doc: accounts.mark_login(doc, user.id, now),
        )
        logger.info("User logged in", extra={"owner_id": user.id})
        return user
