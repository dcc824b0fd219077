from __future__ import annotations

# Minimal ABI for reading cumulative claims from the CM distributor.

CM_DISTRIBUTOR_ABI = [
    {
        "type": "function",
        "stateMutability": "view",
        "name": "cumulativeETHClaimed",
        "inputs": [{"name": "", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "stateMutability": "view",
        "name": "cumulativeINFTClaimed",
        "inputs": [{"name": "", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "stateMutability": "view",
        "name": "merkleRoots",
        "inputs": [{"name": "", "type": "uint8"}],
        "outputs": [{"name": "", "type": "bytes32"}],
    },
]
