from merkle_rewards.core.models.merkle import (
    AIRDROP_DENOMINATIONS,
    AirdropType,
    ClaimResult,
    CurationDistribution,
    Denomination,
    Distribution,
    MerkleLeaf,
    MerkleRootConfig,
    MerkleRootVersion,
    TradingRefundDistribution,
    default_claim_result,
    default_merkle_root_config,
)
from merkle_rewards.core.models.rewards import (
    CurationTotals,
    Phase,
    ReferralTotals,
    RewardsProgram,
    RewardTotals,
    TradingRefundTotals,
    UserRewards,
)

__all__ = [
    "AIRDROP_DENOMINATIONS",
    "AirdropType",
    "ClaimResult",
    "CurationDistribution",
    "CurationTotals",
    "Denomination",
    "Distribution",
    "MerkleLeaf",
    "MerkleRootConfig",
    "MerkleRootVersion",
    "Phase",
    "ReferralTotals",
    "RewardsProgram",
    "RewardTotals",
    "TradingRefundDistribution",
    "TradingRefundTotals",
    "UserRewards",
    "default_claim_result",
    "default_merkle_root_config",
]
