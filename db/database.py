# db/database.py

from supabase import create_client, Client
import streamlit as st


def get_supabase_client() -> Client:
    """
    Returns the Supabase client for this browser session.
    Each session gets its own client because the client holds the
    signed-in user's auth session, which row-level security relies on.
    """

    if "supabase_client" not in st.session_state:
        # imported lazily; `config` lives in app/, which is on sys.path at runtime
        from config import load_config

        cfg = load_config().supabase
        if not cfg.url or not cfg.key:
            raise RuntimeError("Supabase url/anon_key missing from secrets.toml")
        st.session_state.supabase_client = create_client(cfg.url, cfg.key)

    return st.session_state.supabase_client


def reset_supabase_client() -> None:
    """Drops the cached client, e.g. after sign-out."""
    st.session_state.pop("supabase_client", None)
