from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives import hashes
from cryptography.exceptions import InvalidKey
import base64
import binascii
import os
import logging

# hashing parameters, stored as "salt:hash" (both base64)
ITERATIONS = 100000
KEY_SIZE = 32
SALT_SIZE = 16

LEGACY_BCRYPT_PREFIXES = ('$2a$', '$2b$')


def _kdf(salt):
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=ITERATIONS,
    )


def hash_password(password):
    salt = os.urandom(SALT_SIZE)
    derived = _kdf(salt).derive(password.encode())
    return f"{base64.b64encode(salt).decode()}:{base64.b64encode(derived).decode()}"


def needs_reset(stored_hash):
    """Legacy bcrypt hashes cannot be verified here; the owner has to reset"""
    return bool(stored_hash) and stored_hash.startswith(LEGACY_BCRYPT_PREFIXES)


def verify_password(password, stored_hash):
    if not stored_hash or ':' not in stored_hash:
        return False

    salt_b64, hash_b64 = stored_hash.split(':', 1)
    try:
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(hash_b64)
    except (binascii.Error, ValueError) as e:
        logging.error(f"Malformed password hash: {e}")
        return False

    try:
        _kdf(salt).verify(password.encode(), expected)
        return True
    except InvalidKey:
        return False
