"""
Have I Been Pwned (HIBP) integration module.

Looks up breached accounts, breached sites, data classes, pastes and
pwned passwords with one HIBP API request per query.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from breachwatch.hibp.models import (
    InvocationParameters,
    PasswordOutcome,
    QueryResult,
    ResultStatus,
    ValidationType,
)
from breachwatch.hibp.client import HIBPClient, resolve_endpoint, run_query

__all__ = [
    "HIBPClient",
    "InvocationParameters",
    "PasswordOutcome",
    "QueryResult",
    "ResultStatus",
    "ValidationType",
    "resolve_endpoint",
    "run_query",
]
