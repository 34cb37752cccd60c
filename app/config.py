from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import streamlit as st


# ---------------------- DATA CLASSES ----------------------

@dataclass
class SupabaseConfig:
    url: str
    key: str  # anon key; the signed-in user's session carries row-level access


@dataclass
class StorageConfig:
    registration_bucket: str = "team-files"
    documents_bucket: str = "team-documents"


@dataclass
class EmailConfig:
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    from_email: str
    from_name: str


@dataclass
class EventConfig:
    name: str = "Castle Douglas Soapbox Derby"
    tagline: str = "Team Management Portal"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    json: bool = False


@dataclass
class AppConfig:
    supabase: SupabaseConfig
    storage: StorageConfig
    event: EventConfig
    logging: LoggingConfig
    email: Optional[EmailConfig] = None


# ---------------------- LOADING ----------------------

def _has(secrets: Mapping[str, Any], name: str) -> bool:
    # st.secrets raises FileNotFoundError when no secrets.toml exists
    try:
        return name in secrets
    except FileNotFoundError:
        return False


def _section(secrets: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    if _has(secrets, name):
        return secrets[name]
    return {}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def load_config(secrets: Optional[Mapping[str, Any]] = None) -> AppConfig:
    if secrets is None:
        secrets = st.secrets

    # --- Supabase ---
    # Environment variables are the fallback for container deployments
    supabase = _section(secrets, "supabase")
    supabase_cfg = SupabaseConfig(
        url=supabase.get("url") or os.environ.get("SUPABASE_URL", ""),
        key=(
            supabase.get("anon_key")
            or supabase.get("key")
            or os.environ.get("SUPABASE_KEY", "")
        ),
    )

    # --- Storage ---
    storage = _section(secrets, "storage")
    storage_cfg = StorageConfig(
        registration_bucket=storage.get("registration_bucket", "team-files"),
        documents_bucket=storage.get("documents_bucket", "team-documents"),
    )

    # --- Event ---
    event = _section(secrets, "event")
    event_cfg = EventConfig(
        name=event.get("name", EventConfig.name),
        tagline=event.get("tagline", EventConfig.tagline),
    )

    # --- Logging ---
    log = _section(secrets, "logging")
    logging_cfg = LoggingConfig(
        level=str(log.get("level", os.environ.get("LOG_LEVEL", "INFO"))).upper(),
        json=_as_bool(log.get("json", False)),
    )

    # --- Email (optional) ---
    email_cfg = None
    if _has(secrets, "email"):
        email = secrets["email"]
        # ports are often stored as strings in secrets.toml
        email_cfg = EmailConfig(
            smtp_host=email["smtp_host"],
            smtp_port=int(email["smtp_port"]),
            smtp_user=email["smtp_user"],
            smtp_password=email["smtp_password"],
            from_email=email["from_email"],
            from_name=email.get("from_name", event_cfg.name),
        )

    return AppConfig(
        supabase=supabase_cfg,
        storage=storage_cfg,
        event=event_cfg,
        logging=logging_cfg,
        email=email_cfg,
    )
