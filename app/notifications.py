from typing import Dict, Any, Optional, Tuple
from email.mime.text import MIMEText
import logging
import smtplib

from config import EmailConfig, EventConfig
from db.models import CATEGORIES

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    "approved": "Great news! Your team has been approved to race.",
    "rejected": "Unfortunately we are unable to accept your registration this year.",
    "waitlist": "Your team has been placed on the waiting list. We will be in touch if a place opens up.",
    "pending": "Your registration is waiting for review.",
}


# --- EMAIL TOOL -------------------------------------------------------------

def send_email(cfg: Optional[EmailConfig], to_email: str, subject: str, body: str) -> Dict[str, Any]:
    if not cfg or not cfg.smtp_host:
        logger.info("Email skipped: no SMTP config provided.")
        return {"success": True, "error": None}

    msg = MIMEText(body, "plain")
    msg["Subject"] = subject
    msg["From"] = f"{cfg.from_name} <{cfg.from_email}>"
    msg["To"] = to_email

    try:
        with smtplib.SMTP(cfg.smtp_host, cfg.smtp_port) as server:
            server.starttls()
            server.login(cfg.smtp_user, cfg.smtp_password)
            server.send_message(msg)
        logger.info("Email %r sent to %s", subject, to_email)
        return {"success": True, "error": None}

    except Exception as e:
        logger.exception("Email to %s failed", to_email)
        return {"success": False, "error": str(e)}


# --- MESSAGES ---------------------------------------------------------------

def registration_confirmation(registration: Dict[str, Any], event: Optional[EventConfig] = None) -> Tuple[str, str]:
    event = event or EventConfig()
    subject = f"{event.name}: registration received for {registration.get('team_name')}"
    body = (
        f"Hi {registration.get('captain_name')},\n\n"
        f"Thanks for registering {registration.get('team_name')} "
        f"({CATEGORIES.get(registration.get('category'), registration.get('category'))}) "
        f"with soapbox \"{registration.get('soapbox_name')}\".\n\n"
        "Your registration is pending review. We will email you once an organiser has looked at it.\n\n"
        f"{event.name}"
    )
    return subject, body


def status_update_message(registration: Dict[str, Any], event: Optional[EventConfig] = None) -> Tuple[str, str]:
    event = event or EventConfig()
    status = registration.get("status", "pending")
    subject = f"{event.name}: registration {status} for {registration.get('team_name')}"
    lines = [
        f"Hi {registration.get('captain_name')},",
        "",
        STATUS_MESSAGES.get(status, f"Your registration status is now: {status}."),
    ]
    if status == "approved" and registration.get("race_number"):
        lines.append(f"Race number: {registration['race_number']}")
        lines.append(f"Heat time: {registration.get('heat_time') or 'TBD'}")
    lines += ["", event.name]
    return subject, "\n".join(lines)
