"""
Data models for Have I Been Pwned queries and results.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from enum import Enum


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")


class ValidationType(str, Enum):
    """Query mode, one per HIBP endpoint."""

    BREACHED_ACCOUNT = "BreachedAccount"
    ALL_BREACHED_SITES = "AllBreachedSites"
    SINGLE_BREACHED_SITE = "SingleBreachedSite"
    DATA_CLASSES = "DataClasses"
    ALL_PASTES = "AllPastes"
    PWNED_PASSWORDS = "PwnedPasswords"

    @classmethod
    def parse(cls, value: str) -> "ValidationType":
        """Look up a mode by name, ignoring case."""
        for member in cls:
            if member.value.lower() == value.lower():
                return member
        raise ValueError(f"Unknown validation type: {value}")

    @property
    def requires_email(self) -> bool:
        return self in (ValidationType.BREACHED_ACCOUNT, ValidationType.ALL_PASTES)

    @property
    def requires_password(self) -> bool:
        return self is ValidationType.PWNED_PASSWORDS

    @property
    def requires_site_name(self) -> bool:
        return self is ValidationType.SINGLE_BREACHED_SITE

    @property
    def returns_data(self) -> bool:
        """Whether a successful response carries a JSON body we hand back."""
        return self is not ValidationType.PWNED_PASSWORDS


class ResultStatus(str, Enum):
    """Outcome tag of a single query."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


class PasswordOutcome(str, Enum):
    """Meaning of a Pwned Passwords status code."""

    PWNED = "pwned"
    BAD_REQUEST = "bad_request"
    FORBIDDEN = "forbidden"
    NOT_PWNED = "not_pwned"
    RATE_LIMITED = "rate_limited"
    FAILED = "failed"

    @classmethod
    def from_status(cls, status_code: int | None) -> "PasswordOutcome":
        """Map an HTTP status (None for no response) to an outcome."""
        if status_code is None:
            return cls.FAILED
        return PASSWORD_STATUS_OUTCOMES.get(status_code, cls.FAILED)

    @property
    def message(self) -> str:
        return PASSWORD_OUTCOME_MESSAGES[self]


PASSWORD_STATUS_OUTCOMES: dict[int, PasswordOutcome] = {
    200: PasswordOutcome.PWNED,
    400: PasswordOutcome.BAD_REQUEST,
    403: PasswordOutcome.FORBIDDEN,
    404: PasswordOutcome.NOT_PWNED,
    429: PasswordOutcome.RATE_LIMITED,
}

PASSWORD_OUTCOME_MESSAGES: dict[PasswordOutcome, str] = {
    PasswordOutcome.PWNED: (
        "This password has been found in a data breach. "
        "It should never be used again."
    ),
    PasswordOutcome.BAD_REQUEST: (
        "Bad request: the account does not comply with an acceptable format."
    ),
    PasswordOutcome.FORBIDDEN: (
        "Forbidden: no user agent has been specified in the request."
    ),
    PasswordOutcome.NOT_PWNED: (
        "Not found: this password was not found in any data breach."
    ),
    PasswordOutcome.RATE_LIMITED: (
        "Too many requests: the rate limit has been exceeded."
    ),
    PasswordOutcome.FAILED: "Failed to execute PwnedPasswords request",
}


@dataclass
class InvocationParameters:
    """A mode plus the one input it needs."""

    validation_type: ValidationType
    email_address: str | None = None
    password: str | None = field(default=None, repr=False)
    site_name: str | None = None
    domain: str | None = None

    def validate(self) -> list[str]:
        """Validate parameters for the chosen mode. Returns list of errors."""
        errors = []
        vtype = self.validation_type

        if vtype.requires_email:
            if not self.email_address:
                errors.append(f"An email address is required for {vtype.value}")
            elif not EMAIL_PATTERN.match(self.email_address):
                errors.append(f"Invalid email address: {self.email_address}")

        if vtype.requires_password and not self.password:
            errors.append(f"A password is required for {vtype.value}")

        if vtype.requires_site_name and not self.site_name:
            errors.append(f"A site name is required for {vtype.value}")

        return errors

    @property
    def subject(self) -> str:
        """What a diagnostic message should name."""
        vtype = self.validation_type
        if vtype.requires_email and self.email_address:
            return self.email_address
        if vtype.requires_site_name and self.site_name:
            return self.site_name
        if vtype is ValidationType.ALL_BREACHED_SITES and self.domain:
            return self.domain
        return vtype.value


@dataclass
class QueryResult:
    """Result of one dispatched HIBP request."""

    validation_type: ValidationType
    url: str
    status: ResultStatus
    status_code: int | None = None
    data: Any = None
    message: str | None = None
    password_outcome: PasswordOutcome | None = None
    checked_at: datetime = field(default_factory=datetime.now)

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    @property
    def is_diagnostic(self) -> bool:
        """True when the caller gets a message rather than structured data."""
        return self.message is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "validation_type": self.validation_type.value,
            "status": self.status.value,
            "status_code": self.status_code,
            "data": self.data,
            "message": self.message,
            "password_outcome": (
                self.password_outcome.value if self.password_outcome else None
            ),
            "checked_at": self.checked_at.isoformat(),
        }
