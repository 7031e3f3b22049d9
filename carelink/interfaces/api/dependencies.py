"""FastAPI dependency utilities."""

from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from carelink.application.use_cases.emergency import EmergencyRequestService
from carelink.application.use_cases.notifications import NotificationDispatcher
from carelink.config import get_settings
from carelink.domain.entities import User
from carelink.infrastructure.database import get_db
from carelink.infrastructure.email import EmailSender, build_email_sender
from carelink.infrastructure.notifications import notification_publisher
from carelink.infrastructure.repositories import UserRepository
from carelink.infrastructure.security import decode_access_token, password_signature

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_error(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_error() from exc

    email = payload.get("sub")
    signature = payload.get("pwd_sig")
    if not isinstance(email, str) or not isinstance(signature, str):
        raise _credentials_error()

    user = UserRepository(db).get_by_email(email)
    if user is None:
        raise _credentials_error("User not found")

    if signature != password_signature(user):
        raise _credentials_error()

    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return current_user


@lru_cache
def get_email_sender() -> EmailSender:
    """Return the email sender selected by the current settings."""

    return build_email_sender(get_settings())


def get_notification_dispatcher(
    db: Session = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
) -> NotificationDispatcher:
    settings = get_settings()
    return NotificationDispatcher(
        db,
        email_sender,
        dashboard_url=settings.dashboard_url,
        email_timeout=settings.email_timeout_seconds,
        publisher=notification_publisher,
    )


def get_emergency_service(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> EmergencyRequestService:
    return EmergencyRequestService(db, dispatcher)
