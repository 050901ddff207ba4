"""
Pi-hole API Client - API Endpoint Constants

All endpoints are relative to the server base URL (e.g. ``http://pi.hole``).
"""

# Authentication
API_AUTH = "/api/auth"
API_AUTH_SESSIONS = "/api/auth/sessions"
API_AUTH_SESSION = "/api/auth/session"  # Needs /{id}
API_AUTH_TOTP = "/api/auth/totp"
API_AUTH_APP = "/api/auth/app"

# DNS blocking
API_DNS_BLOCKING = "/api/dns/blocking"

# System info
API_INFO_VERSION = "/api/info/version"
API_INFO_SYSTEM = "/api/info/system"
API_INFO_HOST = "/api/info/host"
API_INFO_FTL = "/api/info/ftl"
API_INFO_CLIENT = "/api/info/client"

# Discovery
API_ENDPOINTS = "/api/endpoints"

# Session headers
HEADER_SID = "X-FTL-SID"
HEADER_CSRF = "X-FTL-CSRF"

# Headers never written to logs
REDACTED_HEADERS = frozenset({"authorization", HEADER_SID.lower(), HEADER_CSRF.lower()})

# Lifetime assumed for a session id/csrf pair supplied up front (seconds)
PRESET_SESSION_VALIDITY = 300
