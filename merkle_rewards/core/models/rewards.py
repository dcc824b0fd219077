from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import ConfigDict, Field, computed_field

from merkle_rewards.core.constants.base import MANTISSA
from merkle_rewards.core.models.merkle import ClaimResult, FirestoreModel, WeiString
from merkle_rewards.core.utils.amounts import parse_wei


class Phase(FirestoreModel):
    # Programs carry per-phase reward settings we pass through untouched.
    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    is_active: bool = False
    progress: float = 0


class RewardsProgram(FirestoreModel):
    phases: list[Phase] = Field(default_factory=list)
    updated_at: int = 0


class TransactionFeeTotals(FirestoreModel):
    volume: float = 0
    rewards: float = 0
    user_sells: int = 0
    user_buys: int = 0


class TradingRefundTotals(TransactionFeeTotals):
    claim: ClaimResult | None = None


class CurationTotals(FirestoreModel):
    total_protocol_fees_accrued_wei: WeiString = "0"
    claim: ClaimResult | None = None

    @computed_field(alias="totalProtocolFeesAccruedEth")
    @property
    def total_protocol_fees_accrued_eth(self) -> str:
        eth = Decimal(parse_wei(self.total_protocol_fees_accrued_wei)) / Decimal(
            MANTISSA
        )
        return format(eth.normalize(), "f")


class ReferralTotals(FirestoreModel):
    referral_link: str = ""
    num_referrals: int = 0
    num_referral_sales: int = 0
    fees_generated_wei: WeiString = "0"


class UserPhaseReward(FirestoreModel):
    """A user's trading activity in one program phase, joined by phase name."""

    id: str
    name: str = ""
    is_active: bool = False
    user_volume: float = 0
    user_rewards: float = 0
    user_sells: int = 0
    user_buys: int = 0
    trading_fee: Any = None
    nft_reward: Any = None
    curation: Any = None


class RewardTotals(FirestoreModel):
    trading_refund: TradingRefundTotals
    curation: CurationTotals
    referrals: ReferralTotals


class UserRewards(FirestoreModel):
    chain_id: int
    user: str
    totals: RewardTotals
    phase_rewards: list[UserPhaseReward] = Field(default_factory=list)
    # Airdrop type -> error message, populated only by non-strict reads.
    errors: dict[str, str] = Field(default_factory=dict)

