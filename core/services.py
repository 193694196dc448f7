"""
Google service wiring.

Loads the stored authorized-user credential and builds the Docs, Drive and
Gmail clients. Obtaining the credential (the consent flow) happens elsewhere;
this module only checks that the wiring is in place.
"""

import logging
import os
from typing import Any

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from core.config import FormatterConfig, get_config
from core.errors import MissingConfigurationError, NotAuthenticatedError

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/documents",
    "https://www.googleapis.com/auth/drive.metadata.readonly",
    "https://www.googleapis.com/auth/gmail.send",
]


def load_credentials(config: FormatterConfig | None = None) -> Credentials:
    """
    Load the stored credential for the configured OAuth client.

    Raises:
        MissingConfigurationError: If the OAuth client id/secret are not configured.
        NotAuthenticatedError: If no stored credential exists or it cannot be refreshed.
    """
    config = config or get_config()
    if not config.is_oauth_configured():
        raise MissingConfigurationError()

    if not os.path.exists(config.token_file):
        raise NotAuthenticatedError(token_file=config.token_file)

    credentials = Credentials.from_authorized_user_file(config.token_file, SCOPES)
    if credentials.valid:
        return credentials

    if credentials.expired and credentials.refresh_token:
        try:
            credentials.refresh(Request())
        except RefreshError as e:
            raise NotAuthenticatedError(
                f"Stored Google credential could not be refreshed: {e}", token_file=config.token_file
            ) from e
        logger.info("Refreshed stored Google credential")
        return credentials

    raise NotAuthenticatedError(token_file=config.token_file)


def build_service(service_name: str, version: str, credentials: Credentials) -> Any:
    """Build a googleapiclient resource without the discovery cache."""
    return build(service_name, version, credentials=credentials, cache_discovery=False)


def build_docs_service(credentials: Credentials) -> Any:
    return build_service("docs", "v1", credentials)


def build_drive_service(credentials: Credentials) -> Any:
    return build_service("drive", "v3", credentials)


def build_gmail_service(credentials: Credentials) -> Any:
    return build_service("gmail", "v1", credentials)
