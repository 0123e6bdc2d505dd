"""
Security Configuration
Cookie/header names shared by the CSRF client helper and the server-side
middleware, plus the response headers added to every HTTP response.
"""

# Verbs that change server state and therefore carry the CSRF header
STATE_CHANGING_METHODS = frozenset({"POST", "PUT", "DELETE", "PATCH"})

CSRF_CONFIG = {
    "token_bytes": 32,
    "cookie_name": "csrf-token",
    "header_name": "X-CSRF-Token",
    "max_age": 60 * 60 * 24,  # 24 hours
    "same_site": "strict",
    "http_only": False,  # The browser helper must be able to read it
    "refresh_path": "/builder/templates",
}

# Paths that handle their own request authenticity (e.g. signed webhooks)
CSRF_EXEMPT_PREFIXES = (
    "/api/webhooks/",
)

SECURITY_HEADERS = [
    (b"x-content-type-options", b"nosniff"),
    (b"x-frame-options", b"DENY"),
    (b"x-xss-protection", b"1; mode=block"),
    (b"referrer-policy", b"strict-origin-when-cross-origin"),
    (b"permissions-policy", b"camera=(), microphone=(), geolocation=()"),
]
