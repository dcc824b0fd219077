from __future__ import annotations

from merkle_rewards.core.constants.base import ZERO_ADDRESS
from merkle_rewards.core.constants.chains import (
    CHAIN_ID_ETHEREUM,
    CHAIN_ID_GOERLI,
    CHAIN_ID_POLYGON,
)

# CM distributor deployments.
#
# Notes:
# - ZERO_ADDRESS marks a chain that is known but has no registered deployment.
# - Deployed addresses come from CONFIG["merkle"]["distributor_addresses"];
#   an unconfigured chain raises UnsupportedChainError.
CM_DISTRIBUTOR_BY_CHAIN: dict[int, str] = {
    CHAIN_ID_ETHEREUM: ZERO_ADDRESS,
    CHAIN_ID_GOERLI: ZERO_ADDRESS,
    CHAIN_ID_POLYGON: ZERO_ADDRESS,
}
