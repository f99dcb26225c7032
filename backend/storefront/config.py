"""
storefront/config.py - Application configuration and Firebase initialization.

This module defines a Pydantic BaseSettings class to load configuration from environment,
and initializes the Firebase Admin SDK (Firestore) on first use.
Other modules import `settings` from here, and receive the Firestore client through
the `get_db` dependency so tests can swap it out.
"""
from functools import lru_cache
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""
    firebase_cred_file: str = "firebase_service_account.json"
    firebase_project_id: Optional[str] = None

    # Firebase credentials from environment variables (for Cloud Run)
    firebase_private_key_id: Optional[str] = None
    firebase_private_key: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_client_id: Optional[str] = None
    firebase_auth_uri: Optional[str] = None
    firebase_token_uri: Optional[str] = None
    firebase_auth_provider_x509_cert_url: Optional[str] = None
    firebase_client_x509_cert_url: Optional[str] = None

    # Prepended to every collection name (e.g. "staging_")
    firebase_collection_prefix: str = ""

    toss_secret_key: str = ""
    toss_api_base_url: str = "https://api.tosspayments.com"
    toss_timeout_seconds: float = 30.0

    debug: bool = False
    log_level: str = "INFO"
    allowed_origins: str = "*"  # Comma-separated list or '*' for all

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


# Load settings from environment (.env file, etc.)
settings = Settings()


def _credentials(cfg: Settings) -> credentials.Certificate:
    if all([
        cfg.firebase_private_key_id,
        cfg.firebase_private_key,
        cfg.firebase_client_email,
        cfg.firebase_client_id,
        cfg.firebase_auth_uri,
        cfg.firebase_token_uri,
        cfg.firebase_auth_provider_x509_cert_url,
        cfg.firebase_client_x509_cert_url,
    ]):
        # Cloud Run: the private key arrives with escaped newlines
        return credentials.Certificate({
            "type": "service_account",
            "project_id": cfg.firebase_project_id,
            "private_key_id": cfg.firebase_private_key_id,
            "private_key": cfg.firebase_private_key.replace("\\n", "\n"),
            "client_email": cfg.firebase_client_email,
            "client_id": cfg.firebase_client_id,
            "auth_uri": cfg.firebase_auth_uri,
            "token_uri": cfg.firebase_token_uri,
            "auth_provider_x509_cert_url": cfg.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": cfg.firebase_client_x509_cert_url,
        })
    # Local development: service account file
    return credentials.Certificate(cfg.firebase_cred_file)


def init_firebase(cfg: Settings = settings) -> firebase_admin.App:
    """Initialize the default Firebase app once; later calls return it."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        options = {"projectId": cfg.firebase_project_id} if cfg.firebase_project_id else None
        return firebase_admin.initialize_app(_credentials(cfg), options)


@lru_cache(maxsize=1)
def get_firestore_client():
    init_firebase()
    return firestore.client()


def get_db():
    """FastAPI dependency returning the Firestore client."""
    return get_firestore_client()
