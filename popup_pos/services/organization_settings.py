from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from popup_pos.models.organization import Organization
from popup_pos.schemas.settings import OrganizationSettingsUpdate
from popup_pos.services import tenant_directory

logger = logging.getLogger(__name__)


def get_settings(db: Session, organization_id: int) -> Organization:
    return tenant_directory.get_organization_by_id(db, organization_id)


def update_settings(db: Session, organization_id: int, payload: OrganizationSettingsUpdate) -> Organization:
    organization = tenant_directory.get_organization_by_id(db, organization_id)
    changes = payload.model_dump(exclude_unset=True)

    if "checkout_message" in changes:
        message = (changes["checkout_message"] or "").strip()
        organization.checkout_message = message or None

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(organization)
    logger.info("[SETTINGS] settings updated organization_id=%s fields=%s", organization_id, sorted(changes))
    return organization
