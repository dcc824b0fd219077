__version__ = "0.1.0"

from merkle_rewards.core import (
    BaseAdapter,
    ClaimResult,
    MerkleRootConfig,
    UserRewards,
)

__all__ = [
    "__version__",
    "BaseAdapter",
    "ClaimResult",
    "MerkleRootConfig",
    "UserRewards",
]
