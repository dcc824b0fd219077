from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    computed_field,
)
from pydantic.alias_generators import to_camel

from merkle_rewards.core.constants.base import NULL_HASH
from merkle_rewards.core.constants.merkle import UNPUBLISHED_NONCE
from merkle_rewards.core.utils.amounts import format_wei, parse_wei


class AirdropType(StrEnum):
    # Values are the distribution type tags the publisher writes into document ids.
    CURATION = "ETH"
    TRADING_REFUND = "INFT"


class Denomination(StrEnum):
    ETH = "ETH"
    TOKEN = "TOKEN"


# Closed dispatch: one on-chain accessor per airdrop type.
AIRDROP_DENOMINATIONS: dict[AirdropType, Denomination] = {
    AirdropType.CURATION: Denomination.ETH,
    AirdropType.TRADING_REFUND: Denomination.TOKEN,
}


class DistributionSource(StrEnum):
    CURATION = "CURATION"
    TRADING_FEE_REFUND = "TRADING_FEE_REFUND"
    LISTING_REWARDS = "LISTING_REWARDS"
    BUY_REWARDS = "BUY_REWARDS"


DISTRIBUTION_SOURCES: dict[AirdropType, tuple[DistributionSource, ...]] = {
    AirdropType.CURATION: (DistributionSource.CURATION,),
    AirdropType.TRADING_REFUND: (
        DistributionSource.TRADING_FEE_REFUND,
        DistributionSource.LISTING_REWARDS,
        DistributionSource.BUY_REWARDS,
    ),
}


def _coerce_wei(value: Any) -> str:
    return format_wei(parse_wei(value))


# Wei amounts travel as base-10 strings and are parsed straight into int.
WeiString = Annotated[
    str, BeforeValidator(_coerce_wei), PlainSerializer(str, return_type=str)
]


def default_source_amounts(airdrop_type: AirdropType | str) -> dict[str, str]:
    return {str(source): "0" for source in DISTRIBUTION_SOURCES[AirdropType(airdrop_type)]}


class FirestoreModel(BaseModel):
    """Documents are stored with camelCase keys; Python code uses snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class CurationDistribution(FirestoreModel):
    type: Literal["ETH"] = "ETH"
    chain_id: int
    staking_contract_address: str = ""
    token_contract_address: str = ""
    airdrop_contract_address: str
    max_timestamp: int = 0


class TradingRefundDistribution(FirestoreModel):
    type: Literal["INFT"] = "INFT"
    chain_id: int
    token_contract_address: str = ""
    airdrop_contract_address: str
    phase_ids: list[str] = Field(default_factory=list)


Distribution = Annotated[
    CurationDistribution | TradingRefundDistribution, Field(discriminator="type")
]

_DISTRIBUTION_MODELS: dict[AirdropType, type[FirestoreModel]] = {
    AirdropType.CURATION: CurationDistribution,
    AirdropType.TRADING_REFUND: TradingRefundDistribution,
}


def default_distribution(
    airdrop_type: AirdropType | str, chain_id: int, distributor_address: str
) -> CurationDistribution | TradingRefundDistribution:
    model = _DISTRIBUTION_MODELS[AirdropType(airdrop_type)]
    return model(chain_id=chain_id, airdrop_contract_address=distributor_address)


class MerkleRootConfig(FirestoreModel):
    config: Distribution
    nonce: int
    root: str
    num_entries: int = 0
    total_cumulative_amount: WeiString = "0"
    source_amounts: dict[str, WeiString] = Field(default_factory=dict)
    updated_at: int = 0

    @property
    def airdrop_type(self) -> AirdropType:
        return AirdropType(self.config.type)

    @property
    def denomination(self) -> Denomination:
        return AIRDROP_DENOMINATIONS[self.airdrop_type]

    @property
    def is_published(self) -> bool:
        return self.nonce > UNPUBLISHED_NONCE


class MerkleRootVersion(MerkleRootConfig):
    pass


def default_merkle_root_config(
    chain_id: int, airdrop_type: AirdropType | str, distributor_address: str
) -> MerkleRootConfig:
    """Canonical state of a program the publisher has not released yet."""
    return MerkleRootConfig(
        config=default_distribution(airdrop_type, chain_id, distributor_address),
        nonce=UNPUBLISHED_NONCE,
        root=NULL_HASH,
        num_entries=0,
        total_cumulative_amount="0",
        source_amounts=default_source_amounts(airdrop_type),
        updated_at=0,
    )


def is_valid_transition(previous: MerkleRootConfig, current: MerkleRootConfig) -> bool:
    """True when ``current`` can follow ``previous`` for the same program.

    Nonces only move forward, a published program never goes back to
    unpublished, and a published nonce keeps its root.
    """
    if current.nonce < previous.nonce:
        return False
    if current.nonce == previous.nonce:
        return current.root == previous.root
    return True


class MerkleLeaf(FirestoreModel):
    nonce: int
    address: str
    cumulative_amount: WeiString
    proof: list[str] = Field(default_factory=list)
    leaf: str = ""
    expected_merkle_root: str
    source_amounts: dict[str, WeiString] = Field(default_factory=dict)
    updated_at: int = 0

    @property
    def cumulative_amount_wei(self) -> int:
        return parse_wei(self.cumulative_amount)


class ClaimResult(MerkleLeaf):
    cumulative_claimed: WeiString
    claimable: WeiString

    @computed_field(alias="merkleRoot")
    @property
    def merkle_root(self) -> str:
        return self.expected_merkle_root

    @computed_field(alias="merkleProof")
    @property
    def merkle_proof(self) -> list[str]:
        return list(self.proof)

    @property
    def cumulative_claimed_wei(self) -> int:
        return parse_wei(self.cumulative_claimed)

    @property
    def claimable_wei(self) -> int:
        return parse_wei(self.claimable)


def default_claim_result(
    config: MerkleRootConfig | None, user_address: str
) -> ClaimResult:
    """Zero-entitlement result for a user with no leaf in the current tree.

    ``cumulative_claimed`` is always "0" here, even when the on-chain claimed
    total was already fetched.
    """
    if config is None:
        return ClaimResult(
            nonce=UNPUBLISHED_NONCE,
            address=user_address,
            cumulative_amount="0",
            proof=[],
            leaf="",
            expected_merkle_root=NULL_HASH,
            source_amounts={},
            updated_at=0,
            cumulative_claimed="0",
            claimable="0",
        )
    return ClaimResult(
        nonce=config.nonce,
        address=user_address,
        cumulative_amount="0",
        proof=[],
        leaf="",
        expected_merkle_root=config.root,
        source_amounts=default_source_amounts(config.airdrop_type),
        updated_at=config.updated_at,
        cumulative_claimed="0",
        claimable="0",
    )
