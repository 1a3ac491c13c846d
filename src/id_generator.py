# src/id_generator.py
"""
Typed Public ID Generator for Glooba
Generates IDs in format: PREFIX-TIMESTAMP-RANDOM
Example: USR-1699564234-A7K9M2QX
"""

import secrets
import string
import time


# Prefix mapping for all resource types
PREFIX_MAP = {
    "user": "USR",
    "post": "PST",
    "comment": "CMT",
    "like": "LIK",
    "notification": "NTF",
    "review": "REV",
    "feedback": "FBK",
    "company_request": "REQ",
    "service_area": "SVA",
    "region": "REG",
    "commune": "COM",
}

_ALPHABET = string.ascii_uppercase + string.digits
RANDOM_LENGTH = 8


def generate_public_id(prefix: str) -> str:
    """
    Generate a typed public ID with format: PREFIX-TIMESTAMP-RANDOM

    Args:
        prefix: 3-letter type prefix (e.g., "USR", "PST") or resource type name (e.g., "user", "post")

    Returns:
        str: Public ID in format PREFIX-TIMESTAMP-RANDOM
        Example: "PST-1699564234-X3P8Q1ZK"
    """
    if prefix in PREFIX_MAP:
        prefix = PREFIX_MAP[prefix]

    timestamp = int(time.time())
    random_part = "".join(secrets.choice(_ALPHABET) for _ in range(RANDOM_LENGTH))

    return f"{prefix}-{timestamp}-{random_part}"


def id_factory(resource_type: str):
    """Column default factory for a resource type."""
    prefix = PREFIX_MAP[resource_type]

    def _generate() -> str:
        return generate_public_id(prefix)

    return _generate


def parse_public_id(public_id: str) -> dict:
    """
    Parse a public ID into its components.

    Example:
        >>> parse_public_id("USR-1699564234-A7K9M2QX")["resource_type"]
        'user'
    """
    try:
        parts = public_id.split("-")
        if len(parts) != 3:
            raise ValueError(f"Invalid public ID format: {public_id}")

        prefix, timestamp_str, random_part = parts

        resource_type = None
        for rtype, rpref in PREFIX_MAP.items():
            if rpref == prefix:
                resource_type = rtype
                break

        return {
            "prefix": prefix,
            "timestamp": int(timestamp_str),
            "random": random_part,
            "resource_type": resource_type,
        }
    except (ValueError, IndexError) as e:
        raise ValueError(f"Failed to parse public ID '{public_id}': {e}")


def validate_public_id(public_id: str, expected_prefix: str = None) -> bool:
    """
    Validate a public ID format and optionally check the prefix.

        >>> validate_public_id("USR-1699564234-A7K9M2QX", "USR")
        True
        >>> validate_public_id("PST-1699564234-A7K9M2QX", "USR")
        False
    """
    try:
        parsed = parse_public_id(public_id)

        if expected_prefix and parsed["prefix"] != expected_prefix:
            return False

        if not parsed["prefix"].isupper():
            return False
        if not parsed["random"].isalnum():
            return False
        if len(parsed["random"]) != RANDOM_LENGTH:
            return False

        return True
    except (ValueError, KeyError):
        return False


__all__ = [
    "PREFIX_MAP",
    "generate_public_id",
    "id_factory",
    "parse_public_id",
    "validate_public_id",
]
