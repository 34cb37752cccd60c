from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
import os
import re

from email_validator import validate_email as _validate_email, EmailNotValidError

from db.models import CATEGORIES


REQUIRED_FIELDS = [
    "team_name",
    "captain_name",
    "email",
    "phone",
    "soapbox_name",
    "category",
]

FIELD_LABELS = {
    "team_name": "Team Name",
    "captain_name": "Captain Name",
    "email": "Email",
    "phone": "Phone",
    "soapbox_name": "Soapbox Name",
    "soapbox_description": "Soapbox Description",
    "category": "Category",
}

ALLOWED_UPLOAD_EXTENSIONS = (".pdf", ".doc", ".docx", ".jpg", ".jpeg", ".png")


@dataclass
class TeamMemberEntry:
    member_name: str = ""
    member_age: int = 0


@dataclass
class RegistrationForm:
    team_name: str = ""
    captain_name: str = ""
    email: str = ""
    phone: str = ""
    soapbox_name: str = ""
    soapbox_description: str = ""
    category: str = ""
    members: List[TeamMemberEntry] = field(default_factory=list)

    def to_payload(self, user_id: str, file_url: str = "") -> Dict[str, Any]:
        return {
            "user_id": user_id,
            "team_name": self.team_name.strip(),
            "captain_name": self.captain_name.strip(),
            "email": self.email.strip(),
            "phone": self.phone.strip(),
            "soapbox_name": self.soapbox_name.strip(),
            "soapbox_description": self.soapbox_description.strip(),
            "category": self.category,
            "file_url": file_url,
        }


# ----------------- VALIDATORS ------------------------

def validate_email(email: str) -> bool:
    try:
        _validate_email(email, check_deliverability=False)
        return True
    except EmailNotValidError:
        return False


def validate_phone(phone: str) -> bool:
    digits = re.sub(r"\D", "", phone)
    return 10 <= len(digits) <= 15


def allowed_upload(filename: str) -> bool:
    _, ext = os.path.splitext(filename.lower())
    return ext in ALLOWED_UPLOAD_EXTENSIONS


# ----------------- FORM CHECKS ------------------------

def get_missing_fields(form: RegistrationForm) -> List[str]:
    missing = []
    for f in REQUIRED_FIELDS:
        value = getattr(form, f, None)
        if value is None or not str(value).strip():
            missing.append(f)
    return missing


def validate_form(form: RegistrationForm, upload_name: Optional[str] = None) -> Dict[str, str]:
    """Returns field -> message for every problem, in form order."""
    errors: Dict[str, str] = {}

    for f in get_missing_fields(form):
        errors[f] = f"{FIELD_LABELS[f]} is required."

    if "email" not in errors and not validate_email(form.email.strip()):
        errors["email"] = "Invalid email. Please try format: name@example.com"

    if "phone" not in errors and not validate_phone(form.phone):
        errors["phone"] = "Invalid phone number. Please enter a valid phone number."

    if "category" not in errors and form.category not in CATEGORIES:
        errors["category"] = "Please choose a category: Under 12 or Open."

    if upload_name and not allowed_upload(upload_name):
        errors["file"] = (
            "Unsupported file type. Allowed: " + ", ".join(ALLOWED_UPLOAD_EXTENSIONS)
        )

    return errors


def members_to_insert(form: RegistrationForm, registration_id: Any) -> List[Dict[str, Any]]:
    # Blank rows left in the form are dropped, not rejected
    rows = []
    for member in form.members:
        name = (member.member_name or "").strip()
        if name and member.member_age and member.member_age > 0:
            rows.append(
                {
                    "registration_id": registration_id,
                    "member_name": name,
                    "member_age": int(member.member_age),
                }
            )
    return rows


def generate_summary(form: RegistrationForm) -> str:
    members = [m for m in form.members if m.member_name.strip()]
    lines = [
        f"- **Team:** {form.team_name}",
        f"- **Captain:** {form.captain_name}",
        f"- **Email:** {form.email}",
        f"- **Phone:** {form.phone or 'N/A'}",
        f"- **Soapbox:** {form.soapbox_name}",
        f"- **Category:** {CATEGORIES.get(form.category, form.category)}",
        f"- **Members:** {len(members)}",
    ]
    return "\n".join(lines)
