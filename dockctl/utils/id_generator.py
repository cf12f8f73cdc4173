"""ID generation utilities."""

import secrets
import string


def generate_nanoid(length: int = 21) -> str:
    """Generate a URL-safe random ID of ``length`` characters."""
    alphabet = string.ascii_letters + string.digits + "_-"
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_request_id() -> str:
    """Generate a request ID for error tracking."""
    return generate_nanoid(21)
