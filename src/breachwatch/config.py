"""
Configuration for the HIBP client.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import os
from dataclasses import dataclass
from typing import Any

from breachwatch import __version__

DEFAULT_API_BASE = "https://haveibeenpwned.com/api/v3"
DEFAULT_USER_AGENT = f"breachwatch/{__version__}"


@dataclass
class HIBPConfig:
    """Configuration for HIBP requests."""

    api_base: str = DEFAULT_API_BASE
    api_key: str | None = None
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> "HIBPConfig":
        """Load configuration from environment variables."""
        return cls(
            api_base=os.environ.get("BREACHWATCH_API_BASE", DEFAULT_API_BASE),
            api_key=os.environ.get("HIBP_API_KEY") or None,
            user_agent=os.environ.get("BREACHWATCH_USER_AGENT", DEFAULT_USER_AGENT),
        )

    def validate(self) -> list[str]:
        """Validate configuration. Returns list of errors."""
        errors = []

        if not self.api_base.lower().startswith("https://"):
            errors.append(f"API base URL must use https: {self.api_base}")

        if not self.user_agent:
            errors.append("User-Agent must not be empty")

        return errors

    def masked_api_key(self) -> str | None:
        """API key safe for display: a short prefix, never the whole key."""
        if not self.api_key:
            return None
        if len(self.api_key) <= 8:
            return "********"
        return f"{self.api_key[:8]}..."

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (masks the API key)."""
        return {
            "api_base": self.api_base,
            "api_key": self.masked_api_key(),
            "user_agent": self.user_agent,
        }
