from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from popup_pos.core.database import get_db
from popup_pos.deps import require_org_session
from popup_pos.models.organization import Organization
from popup_pos.schemas.settings import OrganizationSettingsResponse, OrganizationSettingsUpdate
from popup_pos.services import organization_settings
from popup_pos.services.sessions import SessionClaims

router = APIRouter(prefix="/api/{org}/admin/settings", tags=["admin-settings"])


def _to_response(organization: Organization) -> OrganizationSettingsResponse:
    return OrganizationSettingsResponse(
        name=organization.name,
        slug=organization.slug,
        checkout_message=organization.checkout_message,
    )


@router.get("", response_model=OrganizationSettingsResponse)
def get_settings(
    claims: SessionClaims = Depends(require_org_session),
    db: Session = Depends(get_db),
):
    return _to_response(organization_settings.get_settings(db, claims.organization_id))


@router.patch("", response_model=OrganizationSettingsResponse)
def update_settings(
    payload: OrganizationSettingsUpdate,
    claims: SessionClaims = Depends(require_org_session),
    db: Session = Depends(get_db),
):
    return _to_response(organization_settings.update_settings(db, claims.organization_id, payload))
