from merkle_rewards.core.clients.CmDistributorClient import (
    CM_DISTRIBUTOR_CLIENT,
    DENOMINATION_FUNCTIONS,
    CmDistributorClient,
)
from merkle_rewards.core.clients.protocols import (
    ClaimedAmountProvider,
    DocumentStore,
)

__all__ = [
    "CM_DISTRIBUTOR_CLIENT",
    "DENOMINATION_FUNCTIONS",
    "ClaimedAmountProvider",
    "CmDistributorClient",
    "DocumentStore",
]
