"""Errors raised by use cases and translated by the API layer."""


class NotFoundError(LookupError):
    """The requested resource does not exist or is not owned by the caller."""


class BadRequestError(ValueError):
    """The request is invalid and cannot be processed."""


__all__ = ["BadRequestError", "NotFoundError"]
