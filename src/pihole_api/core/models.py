"""
Pi-hole API Client - Data Models

Pydantic models for configuration and login payloads, and the request
descriptor passed down the request pipeline.
"""

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
SUPPORTED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


class PiholeConfig(BaseModel):
    """Configuration for a Pi-hole connection."""

    model_config = ConfigDict(validate_assignment=True)

    url: str = Field(..., description="Pi-hole base URL, e.g. http://pi.hole")
    password: Optional[str] = Field(default=None, description="Web/app password", repr=False)
    sid: Optional[str] = Field(default=None, description="Pre-existing session id", repr=False)
    csrf: Optional[str] = Field(default=None, description="Pre-existing CSRF token", repr=False)
    verify_ssl: bool = Field(default=True, description="Whether to verify SSL certificates")

    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")
    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    retry_delay_base: float = Field(default=1.0, ge=0, description="First backoff delay in seconds")
    retry_delay_max: float = Field(default=10.0, ge=0, description="Backoff ceiling in seconds")
    backoff_multiplier: float = Field(default=2.0, ge=1, description="Backoff growth factor")

    auto_refresh: bool = Field(default=True, description="Re-login shortly before session expiry")
    refresh_threshold: float = Field(
        default=60, ge=0, description="Seconds before expiry that trigger a refresh"
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        """Validate URL format. An empty URL is accepted as 'not configured'."""
        v = v.strip().rstrip("/")
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v


class AuthSession(BaseModel):
    """The ``session`` object of a successful login response."""

    valid: bool = True
    sid: str
    csrf: str
    validity: float = Field(..., ge=0)
    totp: bool = False


class AuthResponse(BaseModel):
    """Login response body."""

    session: AuthSession


@dataclass(frozen=True)
class RequestDescriptor:
    """One request to issue against the API.

    Attributes:
        method: HTTP method
        path: Path appended to the base URL (e.g. "/api/dns/blocking")
        body: JSON body, sent when not None
        headers: Extra headers, win over auth and default headers
        params: Query string parameters
        timeout: Per-request timeout override in seconds
        no_retry: Make exactly one attempt (non-idempotent calls)
    """

    method: HttpMethod
    path: str
    body: Any = None
    headers: Optional[Mapping[str, str]] = None
    params: Optional[Mapping[str, Any]] = None
    timeout: Optional[float] = None
    no_retry: bool = False
