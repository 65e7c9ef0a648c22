import logging
import smtplib

from fastapi import APIRouter

from src.api.core.email_service import send_contact_email
from src.api.core.response import api_response
from src.api.models.contactModel import ContactForm

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["Contact"])


# ✅ SEND
@router.post("")
def send_contact(request: ContactForm):
    try:
        send_contact_email(
            name=request.name,
            email=request.email,
            subject=f"{request.subject_label} - {request.name}",
            body=request.message,
            phone=request.phone,
        )
    except (ValueError, smtplib.SMTPException, OSError) as e:
        logger.error("Contact email from %s failed: %s", request.email, e)
        return api_response(500, "Could not send your message, please try again later")

    return api_response(200, "Your message has been sent")
