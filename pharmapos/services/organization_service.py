"""Organization profile - the header block of receipts and exports."""
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from pharmapos.models import Organization, ORGANIZATION_ID
from pharmapos.exceptions import ValidationError
from pharmapos.services.export_service import organization_from_config

logger = logging.getLogger(__name__)

FIELD_LIMITS = {
    'name': 200,
    'description': 500,
    'address': 300,
    'phone': 50,
    'email': 255,
}


def get_organization(session: Session, config) -> Dict[str, str]:
    """Saved profile over the ORGANIZATION_* settings. Currency always comes from config."""
    organization = organization_from_config(config)
    organization.setdefault('description', '')
    organization.setdefault('email', '')

    profile = session.get(Organization, ORGANIZATION_ID)
    if profile:
        organization.update(profile.to_dict())
    return organization


def update_organization(session: Session, payload: Dict[str, Any], config) -> Dict[str, str]:
    """
    Save the profile. Only keys present in payload change; the first save
    starts from the configured header.

    Raises:
        ValidationError: empty name or a field over its length limit.
    """
    changes = {}
    for field, limit in FIELD_LIMITS.items():
        if field not in payload:
            continue
        value = str(payload.get(field) or '').strip()
        if len(value) > limit:
            raise ValidationError(f'{field} cannot exceed {limit} characters.', payload={'field': field})
        changes[field] = value or None

    current = get_organization(session, config)
    if not changes.get('name', current.get('name')):
        raise ValidationError('Organization name is required.', payload={'field': 'name'})

    profile = session.get(Organization, ORGANIZATION_ID)
    if not profile:
        profile = Organization(
            id=ORGANIZATION_ID,
            **{field: current.get(field) or None for field in FIELD_LIMITS}
        )
        session.add(profile)

    for field, value in changes.items():
        setattr(profile, field, value)

    try:
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"[ORGANIZATION] Profile updated: {sorted(changes)}")
    return get_organization(session, config)
