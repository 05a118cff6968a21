"""
Helpers for keeping personal data out of log lines.
"""


def redact_email(email: str) -> str:
    """Redact an email address for logging, keeping the domain."""
    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"
