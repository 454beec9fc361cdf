# lifetrack/app/security/hashing.py
"""
Password hashing with Argon2id.

Stored format (PHC string, unpadded standard base64):

    $argon2id$v=19$m=65536,t=3,p=2$<salt>$<key>

Every parameter needed for verification is encoded in the string itself,
so existing hashes keep verifying even if the constants below change.
The layout must stay byte-compatible with hashes already in the database.
"""
import base64
import binascii
import secrets
from dataclasses import dataclass

from argon2 import exceptions as argon2_exceptions
from argon2.low_level import ARGON2_VERSION, Type, hash_secret_raw

from lifetrack.app.core.errors import DecodeError, HashingError


ALGORITHM = "argon2id"

# Process-wide cost parameters for new hashes
MEMORY_COST_KIB = 64 * 1024
TIME_COST = 3
PARALLELISM = 2
SALT_LENGTH = 16
KEY_LENGTH = 32

# Limits of the argon2 reference implementation
MAX_UINT32 = 2 ** 32 - 1
MAX_PARALLELISM = 2 ** 24 - 1
SUPPORTED_VERSIONS = (0x10, 0x13)


@dataclass(frozen=True)
class DecodedHash:
    version: int
    memory_cost: int
    time_cost: int
    parallelism: int
    salt: bytes
    key: bytes


def _b64encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii").rstrip("=")


def _b64decode(value: str) -> bytes:
    padded = value + "=" * (-len(value) % 4)
    return base64.b64decode(padded, validate=True)


def encode_secret(password: str) -> bytes:
    # surrogatepass keeps lone surrogates from JSON input hashable
    return password.encode("utf-8", errors="surrogatepass")


def _derive_key(password: str, salt: bytes, time_cost: int, memory_cost: int,
                parallelism: int, key_length: int, version: int = ARGON2_VERSION) -> bytes:
    return hash_secret_raw(
        secret=encode_secret(password),
        salt=salt,
        time_cost=time_cost,
        memory_cost=memory_cost,
        parallelism=parallelism,
        hash_len=key_length,
        type=Type.ID,
        version=version,
    )


def hash_password(password: str) -> str:
    """
    Hash a plaintext password with a fresh random salt.

    Raises:
        HashingError: the salt could not be generated or the KDF failed.
    """
    try:
        salt = secrets.token_bytes(SALT_LENGTH)
    except (OSError, NotImplementedError) as exc:
        raise HashingError("unable to generate salt") from exc

    try:
        key = _derive_key(password, salt, TIME_COST, MEMORY_COST_KIB, PARALLELISM, KEY_LENGTH)
    except argon2_exceptions.HashingError as exc:
        raise HashingError("unable to derive key") from exc

    return "$%s$v=%d$m=%d,t=%d,p=%d$%s$%s" % (
        ALGORITHM,
        ARGON2_VERSION,
        MEMORY_COST_KIB,
        TIME_COST,
        PARALLELISM,
        _b64encode(salt),
        _b64encode(key),
    )


def decode_hash(encoded_hash: str) -> DecodedHash:
    """
    Split an encoded hash into its parameters, salt and key.

    Raises:
        DecodeError: the string does not follow the argon2id layout.
    """
    parts = encoded_hash.split("$")
    if len(parts) != 6 or parts[0] != "":
        raise DecodeError("invalid hash format: expected 6 parts, got %d" % len(parts))

    if parts[1] != ALGORITHM:
        raise DecodeError("unsupported algorithm: %r" % parts[1])

    try:
        name, _, raw_version = parts[2].partition("=")
        if name != "v":
            raise ValueError(parts[2])
        version = int(raw_version)

        params = {}
        for item in parts[3].split(","):
            key, _, value = item.partition("=")
            params[key] = int(value)
        memory_cost, time_cost, parallelism = params["m"], params["t"], params["p"]
    except (KeyError, ValueError) as exc:
        raise DecodeError("invalid hash parameters") from exc

    if version not in SUPPORTED_VERSIONS:
        raise DecodeError("unsupported argon2 version: %d" % version)
    if not 1 <= memory_cost <= MAX_UINT32 or not 1 <= time_cost <= MAX_UINT32:
        raise DecodeError("memory or time cost out of range")
    if not 1 <= parallelism <= MAX_PARALLELISM:
        raise DecodeError("parallelism out of range")

    try:
        salt = _b64decode(parts[4])
        key = _b64decode(parts[5])
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("failed to decode salt or key") from exc

    if not salt or not key:
        raise DecodeError("empty salt or key")

    return DecodedHash(version, memory_cost, time_cost, parallelism, salt, key)


def verify_password(password: str, encoded_hash: str) -> bool:
    """
    Check a plaintext password against a stored hash.

    The key is re-derived with the salt and parameters from the stored
    string and compared in constant time.

    Raises:
        DecodeError: the stored hash is malformed.
    """
    decoded = decode_hash(encoded_hash)
    try:
        candidate = _derive_key(
            password,
            decoded.salt,
            decoded.time_cost,
            decoded.memory_cost,
            decoded.parallelism,
            len(decoded.key),
            decoded.version,
        )
    except (argon2_exceptions.HashingError, OverflowError) as exc:
        raise DecodeError("stored hash parameters are not usable") from exc

    return secrets.compare_digest(candidate, decoded.key)
