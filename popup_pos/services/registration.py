"""Organization sign-up and credential checks."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from popup_pos.core.errors import ConflictError, UnauthorizedError, ValidationError
from popup_pos.models.membership import ROLE_OWNER, Membership
from popup_pos.models.organization import Organization
from popup_pos.models.user import User
from popup_pos.services import tenant_directory
from popup_pos.services.passwords import hash_password, verify_password
from popup_pos.utils.slug import is_reserved_slug, is_valid_slug, normalize_slug

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def _slug_exists(db: Session, slug: str) -> bool:
    return db.query(Organization.id).filter(Organization.slug == slug).first() is not None


def _username_exists(db: Session, username: str) -> bool:
    return db.query(User.id).filter(User.username == username).first() is not None


def register_organization(
    db: Session,
    org_name: str,
    org_slug: str,
    username: str,
    password: str,
) -> Organization:
    """Create an organization, its first user and an owner membership together."""
    name = (org_name or "").strip()
    if not name or len(name) > 100:
        raise ValidationError("Organization name must be between 1 and 100 characters")

    slug = normalize_slug(org_slug)
    if not is_valid_slug(slug):
        raise ValidationError("Slug must be 3-50 lowercase letters, numbers, and hyphens")
    if is_reserved_slug(slug):
        raise ValidationError("This URL is reserved")

    username = (username or "").strip()
    if not 3 <= len(username) <= 50:
        raise ValidationError("Username must be between 3 and 50 characters")
    if not 6 <= len(password or "") <= 100:
        raise ValidationError("Password must be between 6 and 100 characters")

    if _slug_exists(db, slug):
        raise ConflictError("This URL is already taken")
    if _username_exists(db, username):
        raise ConflictError("This username is already taken")

    user = User(username=username, password_hash=hash_password(password))
    organization = Organization(name=name, slug=slug)
    organization.memberships.append(Membership(user=user, role=ROLE_OWNER))

    try:
        db.add_all([user, organization])
        db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same slug or username.
        db.rollback()
        raise ConflictError("This URL or username is already taken") from exc
    except Exception:
        db.rollback()
        raise

    db.refresh(organization)
    logger.info("[AUTH] organization registered organization_id=%s slug=%s", organization.id, slug)
    return organization


def authenticate(db: Session, username: str, password: str) -> User:
    user = db.query(User).filter(User.username == (username or "").strip()).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("[AUTH] login failed username=%s", username)
        raise UnauthorizedError(INVALID_CREDENTIALS)
    return user


def authenticate_member(db: Session, org_slug: str, username: str, password: str) -> Membership:
    """Tenant login: the user must belong to the organization behind ``org_slug``.

    An unknown organization reads the same as bad credentials.
    """
    organization = db.query(Organization).filter(Organization.slug == org_slug).first()
    if organization is None:
        logger.warning("[AUTH] login failed org=%s reason=unknown_org", org_slug)
        raise UnauthorizedError(INVALID_CREDENTIALS)

    membership = tenant_directory.find_membership(db, organization.id, (username or "").strip())
    if membership is None or not verify_password(password, membership.user.password_hash):
        logger.warning("[AUTH] login failed org=%s username=%s", org_slug, username)
        raise UnauthorizedError(INVALID_CREDENTIALS)
    return membership
