"""Validation helpers for emergency submissions."""

from carelink.domain.exceptions import BadRequestError

ADDRESS_MIN_LENGTH = 10


def ensure_valid_address(address: str | None) -> str:
    """Return the stripped address or raise ``BadRequestError``."""

    normalized = (address or "").strip()
    if not normalized:
        raise BadRequestError("Address is required")
    if len(normalized) < ADDRESS_MIN_LENGTH:
        raise BadRequestError(
            f"Address must be at least {ADDRESS_MIN_LENGTH} characters"
        )
    return normalized


def normalize_notes(notes: str | None) -> str | None:
    """Return ``notes`` stripped, or ``None`` when nothing meaningful was given."""

    if notes is None:
        return None
    stripped = notes.strip()
    return stripped or None
