"""
inkconnect/core/validators.py

Field validators used by the request schemas.

`password_validator` is the account password policy applied at signup and when
an admin creates an account. `required_text` and `clean_tags` normalize the
contact form, admin-entered names, and the tag lists of artwork and artist profiles.
"""

import string
from typing import Final


# -------------------------------
# Constants
# -------------------------------
MIN_PASSWORD_LENGTH: Final[int] = 8
MAX_PASSWORD_LENGTH: Final[int] = 128


# -------------------------------
# Validator Functions
# -------------------------------
def password_validator(password: str) -> str:
    """
    Enforce the account password policy: ASCII only, at least one upper-case
    letter, lower-case letter, digit and punctuation character, and a length
    between MIN_PASSWORD_LENGTH and MAX_PASSWORD_LENGTH.

    Raises ValueError naming the first rule that fails.
    """
    if not password.isascii():
        raise ValueError("Password must contain only ASCII characters.")

    if not any(c in string.ascii_uppercase for c in password):
        raise ValueError("Password must contain at least one uppercase letter.")

    if not any(c in string.ascii_lowercase for c in password):
        raise ValueError("Password must contain at least one lowercase letter.")

    if not any(c.isdigit() for c in password):
        raise ValueError("Password must contain at least one digit.")

    if not any(c in string.punctuation for c in password):
        raise ValueError("Password must contain at least one special character.")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")

    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_LENGTH} characters long.")

    return password


def required_text(value: str | None, field_name: str = "Value") -> str:
    """Strip surrounding whitespace; raise ValueError when nothing is left."""
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValueError(f"{field_name} is required.")
    return cleaned


def clean_tags(tags: list[str] | None) -> list[str]:
    """Strip each tag, drop blanks and keep first occurrences in order."""
    seen: list[str] = []
    for tag in tags or []:
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen
