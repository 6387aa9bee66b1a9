from __future__ import annotations

import logging

from sqlalchemy.orm import Session, joinedload

from popup_pos.core.errors import NotFoundError
from popup_pos.core.limits import fits_db_int
from popup_pos.models.membership import Membership
from popup_pos.models.organization import Organization
from popup_pos.models.user import User

logger = logging.getLogger(__name__)


def get_organization(db: Session, slug: str) -> Organization:
    """Exact, case-sensitive slug lookup."""
    organization = db.query(Organization).filter(Organization.slug == slug).first() if slug else None
    if organization is None:
        logger.info("[TENANT] slug not found slug=%s", slug)
        raise NotFoundError("Organization")
    return organization


def resolve(db: Session, slug: str) -> int:
    return get_organization(db, slug).id


def get_organization_by_id(db: Session, organization_id: int) -> Organization:
    if not fits_db_int(organization_id):
        raise NotFoundError("Organization")
    organization = db.query(Organization).filter(Organization.id == organization_id).first()
    if organization is None:
        raise NotFoundError("Organization")
    return organization


def roster(db: Session, organization_id: int) -> list[Membership]:
    return (
        db.query(Membership)
        .options(joinedload(Membership.user))
        .filter(Membership.organization_id == organization_id)
        .order_by(Membership.id.asc())
        .all()
    )


def find_membership(db: Session, organization_id: int, username: str) -> Membership | None:
    return (
        db.query(Membership)
        .join(User, User.id == Membership.user_id)
        .options(joinedload(Membership.user))
        .filter(
            Membership.organization_id == organization_id,
            User.username == username,
        )
        .first()
    )


def memberships_for_user(db: Session, user_id: int) -> list[Membership]:
    return (
        db.query(Membership)
        .join(Organization, Organization.id == Membership.organization_id)
        .options(joinedload(Membership.organization))
        .filter(Membership.user_id == user_id)
        .order_by(Organization.name.asc(), Organization.id.asc())
        .all()
    )


def get_membership(db: Session, user_id: int, organization_id: int) -> Membership | None:
    if not (fits_db_int(user_id) and fits_db_int(organization_id)):
        return None
    return (
        db.query(Membership)
        .options(joinedload(Membership.organization), joinedload(Membership.user))
        .filter(
            Membership.user_id == user_id,
            Membership.organization_id == organization_id,
        )
        .first()
    )
