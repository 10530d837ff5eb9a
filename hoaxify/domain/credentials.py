"""
Credential primitives - password hashing and activation tokens.

Passwords are hashed with bcrypt (salted per call). Activation tokens
come from the secrets module so they cannot be predicted.
"""

import secrets

import bcrypt

DEFAULT_BCRYPT_COST = 10
TOKEN_BYTES = 16
BCRYPT_MAX_BYTES = 72


class BcryptPasswordHasher:
    """
    Implements PasswordHasher protocol via bcrypt.

    A fresh salt is generated for every call, so hashing the same
    password twice gives different results.
    """

    def __init__(self, cost: int = DEFAULT_BCRYPT_COST) -> None:
        if cost < DEFAULT_BCRYPT_COST:
            raise ValueError(f"bcrypt cost must be >= {DEFAULT_BCRYPT_COST}, got {cost}")
        self._cost = cost

    def hash(self, password: str) -> str:
        # bcrypt only reads the first 72 bytes; newer releases reject longer input
        secret = password.encode()[:BCRYPT_MAX_BYTES]
        return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=self._cost)).decode()


def generate_activation_token() -> str:
    """Return a random 32-character hex token (128 bits of entropy)."""
    return secrets.token_hex(TOKEN_BYTES)
