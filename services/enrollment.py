# services/enrollment.py
import logging

from sqlalchemy.orm import Session

from model.feedback import CompanyRequest
from schema.common import ActionResult
from schema.feedback import EnrollmentIn
from src.utils import ENROLLMENT_EMAIL_RE, clean_text

logger = logging.getLogger(__name__)

# Checked in order; the first failing rule is reported
REQUIRED_FIELDS = (
    ("company_name", "El nombre de la empresa es obligatorio."),
    ("industry", "Debe seleccionar una industria."),
    ("contact_name", "El nombre de la persona de contacto es obligatorio."),
    ("contact_email", "El correo electrónico es obligatorio."),
)
INVALID_EMAIL = "El correo electrónico no es válido."
MISSING_DESCRIPTION = "La descripción de la empresa es obligatoria."
SAVE_FAILED = "Error al guardar los datos."


def validate_enrollment(data: EnrollmentIn):
    """Return the first validation message, or None when the request is valid."""
    for field, message in REQUIRED_FIELDS:
        if not clean_text(getattr(data, field)):
            return message
    if not ENROLLMENT_EMAIL_RE.search(data.contact_email.strip()):
        return INVALID_EMAIL
    if not clean_text(data.description):
        return MISSING_DESCRIPTION
    return None


def submit_enrollment(db: Session, data: EnrollmentIn) -> ActionResult:
    error = validate_enrollment(data)
    if error:
        return ActionResult(success=False, error=error)

    try:
        request = CompanyRequest(
            name=data.company_name.strip(),
            industry=data.industry.strip(),
            contact_name=data.contact_name.strip(),
            contact_email=data.contact_email.strip(),
            phone=clean_text(data.phone),
            website=clean_text(data.website),
            description=data.description.strip(),
            sustainability=clean_text(data.sustainability),
        )
        db.add(request)
        db.commit()
        logger.info("Enrollment request %s for %s", request.id, request.name)
        return ActionResult(success=True)
    except Exception:
        db.rollback()
        logger.exception("Failed to store enrollment request")
        return ActionResult(success=False, error=SAVE_FAILED)
