import secrets
import string

DEFAULT_ALPHABET = string.ascii_letters + string.digits + string.punctuation


def generate_password(length: int = 16, alphabet: str = DEFAULT_ALPHABET) -> str:
    """Return a random password drawn from alphabet."""
    if length < 1:
        raise ValueError("Password length must be at least 1.")
    if not alphabet:
        raise ValueError("Alphabet must not be empty.")
    return ''.join(secrets.choice(alphabet) for _ in range(length))
