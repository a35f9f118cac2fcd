"""Chain id → human network label.

The table is static configuration; ids not in it render as "Chain ID: <decimal>".
"""

UNKNOWN_NETWORK = "Unknown"

NETWORKS = {
    "0x1": "Ethereum Mainnet",
    "0x3": "Ropsten Testnet",
    "0x4": "Rinkeby Testnet",
    "0x5": "Goerli Testnet",
    "0x2a": "Kovan Testnet",
    "0x89": "Polygon Mainnet",
    "0x13881": "Mumbai Testnet",
    "0xa": "Optimism",
    "0xa4b1": "Arbitrum One",
}


def network_label(chain_id: str) -> str:
    """
    Map a hex chain id (e.g. "0x89") to a label. Raises ValueError for non-hex input.
    """
    chain_id = chain_id.strip().lower()
    if chain_id in NETWORKS:
        return NETWORKS[chain_id]
    return f"Chain ID: {int(chain_id, 16)}"
