"""Test helpers shared across modules."""

from datetime import date, timedelta

from app.domain.identity import OpsIdentity, RegisteredUser
from app.models.clinic import Clinic
from app.models.user import OpsUser, User

OPS_PASSWORD = "Sup3rSecret!"


def as_registered(user: User) -> RegisteredUser:
    return RegisteredUser(id=user.id, email=user.email, name=user.name)


def as_ops(ops_user: OpsUser) -> OpsIdentity:
    return OpsIdentity(id=ops_user.id, email=ops_user.email, name=ops_user.name, role=ops_user.role)


def booking_payload(clinic: Clinic, **overrides) -> dict:
    payload = {
        "clinic_id": str(clinic.id),
        "procedure": "Botox consultation",
        "preferred_date": (date.today() + timedelta(days=14)).isoformat(),
        "preferred_time_slot": "afternoon",
        "guest_email": "a@x.com",
        "locale": "en",
    }
    payload.update(overrides)
    return payload
