"""Account Directory — user records living alongside the ledger in one document.

Invariants:
    - Emails are stripped and lower-cased; at most one user per email
    - The core never sees raw passwords except for length validation;
      hashing and verification happen in the service layer
    - public_user() never contains password_hash

Design Decisions:
    - Registration is split: validate_registration() runs before hashing,
      register() runs inside the unit of work where duplicates are checked
"""

from datetime import datetime

from app.core.document import Document, UserRecord
from app.core.domain_types import Collection, UserId
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.identifiers import next_id


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_registration(
    name: str, email: str, password: str, min_password_length: int,
) -> tuple[str, str]:
    """Check required fields and password length. Returns (name, email) cleaned."""
    if not name or not name.strip():
        raise ValidationError("All fields are required", field="name")
    if not email or not email.strip():
        raise ValidationError("All fields are required", field="email")
    if not password:
        raise ValidationError("All fields are required", field="password")
    if len(password) < min_password_length:
        raise ValidationError(
            f"Password must be at least {min_password_length} characters",
            field="password",
        )
    return name.strip(), normalize_email(email)


def register(
    document: Document, name: str, email: str, password_hash: str, now: datetime,
) -> UserRecord:
    if document.find_user_by_email(email) is not None:
        raise ConflictError("User already exists")
    user = UserRecord(
        id=UserId(next_id(document, Collection.USERS)),
        name=name,
        email=email,
        password_hash=password_hash,
        created_at=now,
        last_login=now,
    )
    document.users.append(user)
    return user


def mark_login(document: Document, user_id: UserId, now: datetime) -> UserRecord:
    user = document.find_user(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    user.last_login = now
    return user


def public_user(user: UserRecord) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "created_at": user.created_at,
        "last_login": user.last_login,
    }
