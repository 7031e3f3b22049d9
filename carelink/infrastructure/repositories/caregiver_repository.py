"""Persistence layer for caregiver profiles."""

from __future__ import annotations

from sqlalchemy.orm import Session, joinedload

from carelink.domain.entities import CaregiverProfile, CaregiverSummary, UserSummary
from carelink.infrastructure.models import CaregiverProfileModel, UserModel
from carelink.utils import ensure_utc


class CaregiverRepository:
    """Directory of caregiver profiles and the users they belong to."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, caregiver_id: int) -> CaregiverProfile | None:
        model = self.session.get(CaregiverProfileModel, caregiver_id)
        return self._to_entity(model) if model else None

    def create(self, profile: CaregiverProfile) -> CaregiverProfile:
        model = CaregiverProfileModel(
            user_id=profile.user_id,
            verified=profile.verified,
            hourly_rate_cents=profile.hourly_rate_cents,
            bio=profile.bio,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_verified(self) -> list[CaregiverSummary]:
        """Return verified profiles joined to their user accounts."""

        query = (
            self.session.query(CaregiverProfileModel)
            .join(UserModel, CaregiverProfileModel.user_id == UserModel.id)
            .options(joinedload(CaregiverProfileModel.user))
            .filter(CaregiverProfileModel.verified.is_(True))
            .order_by(CaregiverProfileModel.id)
        )
        return [self.to_summary(model) for model in query.all()]

    @staticmethod
    def to_summary(model: CaregiverProfileModel) -> CaregiverSummary:
        user = model.user
        return CaregiverSummary(
            id=model.id,
            verified=model.verified,
            hourly_rate_cents=model.hourly_rate_cents,
            user=UserSummary(id=user.id, name=user.name, email=user.email, phone=user.phone),
        )

    @staticmethod
    def _to_entity(model: CaregiverProfileModel) -> CaregiverProfile:
        return CaregiverProfile(
            id=model.id,
            user_id=model.user_id,
            verified=model.verified,
            hourly_rate_cents=model.hourly_rate_cents,
            bio=model.bio,
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["CaregiverRepository"]
