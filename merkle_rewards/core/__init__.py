from merkle_rewards.core.adapters.BaseAdapter import BaseAdapter
from merkle_rewards.core.models.merkle import ClaimResult, MerkleRootConfig
from merkle_rewards.core.models.rewards import UserRewards

__all__ = [
    "BaseAdapter",
    "ClaimResult",
    "MerkleRootConfig",
    "UserRewards",
]
