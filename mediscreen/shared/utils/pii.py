"""Patient identifier hashing for log output.

Patient ids and names are never written to application logs in clear text.
Services log a salted digest instead, which still lets operators correlate
log lines belonging to the same patient.
"""
import hashlib
import logging
from typing import Optional, Union

logger = logging.getLogger(__name__)

MIN_SALT_LENGTH = 32

_PII_SALT: Optional[str] = None


def configure_pii_salt(salt: str) -> None:
    """Set the salt used by hash_pii().

    Must be called during service startup before any identifier is hashed.

    Args:
        salt: Secret salt value, at least 32 characters

    Raises:
        ValueError: If salt is empty or too short
    """
    global _PII_SALT
    if not salt or len(salt) < MIN_SALT_LENGTH:
        logger.critical(
            "PII_SALT_CONFIGURATION_FAILED",
            extra={"reason": "salt_too_short", "min_length": MIN_SALT_LENGTH}
        )
        raise ValueError(f"PII salt must be at least {MIN_SALT_LENGTH} characters")

    _PII_SALT = salt
    logger.info("PII_SALT_CONFIGURED", extra={"salt_length": len(salt)})


def hash_pii(value: Union[str, int]) -> str:
    """Hash a patient identifier for safe logging.

    Args:
        value: Patient id, family name or any other identifying value

    Returns:
        64-char hex SHA-256 digest of the salted value

    Raises:
        RuntimeError: If the salt has not been configured
    """
    if _PII_SALT is None:
        logger.critical(
            "PII_HASH_FAILED",
            extra={"reason": "salt_not_configured", "action": "call configure_pii_salt()"}
        )
        raise RuntimeError("PII salt not configured. Call configure_pii_salt() first.")

    salted = f"{_PII_SALT}{value}"
    return hashlib.sha256(salted.encode()).hexdigest()
