"""
Sign-in, sign-up and role checks against Supabase auth.

The admin flag is never cached across page loads: every guarded page asks
`profiles` again through current_user().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from db import models
from errors import AccessDenied, AuthError, ValidationError, describe_error
from registration_form import validate_email

logger = logging.getLogger(__name__)

ROLES = ("user", "admin")


@dataclass
class PortalUser:
    id: str
    email: str
    is_admin: bool = False


def _to_portal_user(client, user: Any) -> PortalUser:
    return PortalUser(
        id=user.id,
        email=getattr(user, "email", "") or "",
        is_admin=is_admin(client, user.id),
    )


def is_admin(client, user_id: str) -> bool:
    try:
        result = (
            client.table(models.PROFILES)
            .select("is_admin")
            .eq("id", user_id)
            .maybe_single()
            .execute()
        )
    except Exception as exc:
        logger.warning("Profile lookup failed for %s: %s", user_id, describe_error(exc))
        return False

    # maybe_single() returns no response at all when the row is missing
    profile = result.data if result is not None else None
    return bool(profile and profile.get("is_admin"))


def sign_in(client, email: str, password: str) -> PortalUser:
    try:
        response = client.auth.sign_in_with_password({"email": email.strip(), "password": password})
    except Exception as exc:
        raise AuthError(describe_error(exc)) from exc

    if response is None or response.user is None:
        raise AuthError("Invalid login credentials")

    user = _to_portal_user(client, response.user)
    logger.info("User %s signed in (admin=%s)", user.id, user.is_admin)
    return user


def sign_in_admin(client, email: str, password: str) -> PortalUser:
    user = sign_in(client, email, password)
    if not user.is_admin:
        sign_out(client)
        logger.warning("Non-admin %s attempted admin sign-in", user.id)
        raise AccessDenied("Admin privileges required")
    return user


def sign_up(client, email: str, password: str, full_name: str) -> None:
    email = email.strip()
    if not validate_email(email):
        raise ValidationError({"email": "Invalid email. Please try format: name@example.com"})
    if not password:
        raise ValidationError({"password": "Password is required."})

    try:
        client.auth.sign_up(
            {
                "email": email,
                "password": password,
                "options": {"data": {"full_name": full_name.strip()}},
            }
        )
    except Exception as exc:
        raise AuthError(describe_error(exc)) from exc
    logger.info("Account created for %s", email)


def sign_out(client) -> None:
    try:
        client.auth.sign_out()
    except Exception as exc:
        raise AuthError(describe_error(exc)) from exc


def current_user(client) -> Optional[PortalUser]:
    try:
        response = client.auth.get_user()
    except Exception as exc:
        logger.info("Auth check failed: %s", describe_error(exc))
        return None

    if response is None or response.user is None:
        return None
    return _to_portal_user(client, response.user)


def authorize(user: Optional[PortalUser], required_role: str = "user") -> bool:
    if required_role not in ROLES:
        raise ValueError(f"Unknown role: {required_role}")
    if user is None:
        return False
    if required_role == "admin":
        return user.is_admin
    return True
