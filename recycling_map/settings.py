"""Firebase settings loaded from Streamlit secrets or the environment.

Expected ``.streamlit/secrets.toml`` layout::

    [firebase]
    api_key = "..."
    project_id = "..."

    [firebase.service_account]   # optional, else application default credentials
    type = "service_account"
    ...

Environment variables (FIREBASE_API_KEY, FIREBASE_PROJECT_ID) fill in
whatever the secrets section does not set.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from recycling_map.model.errors import ConfigurationError

logger = logging.getLogger(__name__)


class FirebaseSettings(BaseSettings):
    """Credentials and identifiers for the Firebase project."""

    model_config = SettingsConfigDict(
        env_prefix="FIREBASE_",
        case_sensitive=False,
        str_strip_whitespace=True,
        extra="ignore",
        frozen=True,
    )

    api_key: str = Field(min_length=1)
    project_id: str = Field(min_length=1)
    service_account: dict[str, Any] | None = Field(default=None, repr=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FirebaseSettings":
        """Build settings from a secrets section; the environment covers missing keys.

        Raises:
            ConfigurationError: If api_key or project_id is missing.
        """
        # Empty values in the section must not hide the environment
        overrides = {key: value for key, value in data.items() if value not in (None, "", {})}
        if "service_account" in overrides:
            overrides["service_account"] = dict(overrides["service_account"])
        try:
            return cls(**overrides)
        except ValidationError as e:
            missing = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            raise ConfigurationError(f"Missing Firebase settings: {', '.join(missing)}") from e


def load_firebase_settings() -> FirebaseSettings:
    """Load settings from st.secrets["firebase"], or the environment if absent."""
    import streamlit as st

    try:
        section = st.secrets.get("firebase", {})
    except FileNotFoundError:
        # No secrets.toml at all
        logger.info("No Streamlit secrets file found, using environment variables")
        section = {}
    return FirebaseSettings.from_mapping(section)
