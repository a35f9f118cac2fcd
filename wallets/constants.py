"""Address rules shared by the registry.


- ADDRESS_RE matches a 20-byte account id written as 0x + 40 hex digits (any case).
- normalize_address lowercases an address for storage and lookups.
"""

import re

ADDRESS_RE = re.compile(r"0x[a-fA-F0-9]{40}")
DEFAULT_NETWORK = "Unknown"
NETWORK_MAX_LENGTH = 100


def normalize_address(address: str) -> str:
    """
    Lowercase and strip an address; path parameters are looked up this way too.
    """
    return str(address).strip().lower()


def is_valid_address(address: str) -> bool:
    return ADDRESS_RE.fullmatch(address) is not None
