"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt generates a fresh
random salt per hash and embeds it in the output ("$2b$<rounds>$..."), so
the stored value is all that's needed to verify later. The work factor
is deliberately slow; callers on the event loop run these in a thread.
Passwords are truncated to 72 bytes (bcrypt's limit).
"""

import bcrypt

from devconnect.config import settings


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with bcrypt and a fresh salt."""
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its stored hash."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False
