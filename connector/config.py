"""Connector settings, read once from the environment."""

import os

REGISTRY_URL = os.getenv("WALLET_REGISTRY_URL", "http://localhost:5000/api/wallet").rstrip("/")
REGISTRY_TIMEOUT = float(os.getenv("WALLET_REGISTRY_TIMEOUT", "10"))

# Storage key for the "previously connected" flag
CONNECTED_FLAG_KEY = "wallet-connected"

INSTALL_URL = "https://metamask.io/download/"
