"""Use cases for registering users and caregiver profiles."""

from __future__ import annotations

from sqlalchemy.orm import Session

from carelink.domain.entities import CaregiverProfile, Role, User
from carelink.domain.exceptions import BadRequestError, NotFoundError
from carelink.infrastructure.repositories import (
    CaregiverRepository,
    RoleRepository,
    UserRepository,
)
from carelink.infrastructure.security import get_password_hash


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    role_alias: str,
    phone: str | None = None,
    is_active: bool = True,
) -> User:
    """Create a user with a hashed password under the role ``role_alias``."""

    normalized_email = email.strip().lower()
    if not normalized_email or "@" not in normalized_email:
        raise BadRequestError("A valid email address is required")

    repository = UserRepository(session)
    if repository.get_by_email(normalized_email) is not None:
        raise BadRequestError("Email is already registered")

    role = RoleRepository(session).get_by_alias(role_alias)
    if role is None:
        raise NotFoundError(f"Role '{role_alias}' not found")

    return repository.create(
        User(
            id=None,
            role=Role(id=role.id, name=role.name, alias=role.alias),
            name=name.strip(),
            email=normalized_email,
            password=get_password_hash(password),
            phone=phone,
            is_active=is_active,
        )
    )


def create_caregiver_profile(
    session: Session,
    *,
    user_id: int,
    hourly_rate_cents: int,
    verified: bool = False,
    bio: str | None = None,
) -> CaregiverProfile:
    """Attach a caregiver profile to an existing user."""

    if hourly_rate_cents < 0:
        raise BadRequestError("Hourly rate cannot be negative")
    if UserRepository(session).get(user_id) is None:
        raise NotFoundError("User not found")

    return CaregiverRepository(session).create(
        CaregiverProfile(
            id=None,
            user_id=user_id,
            verified=verified,
            hourly_rate_cents=hourly_rate_cents,
            bio=bio,
        )
    )
