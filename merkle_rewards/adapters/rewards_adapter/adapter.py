from __future__ import annotations

import asyncio
from typing import Any

from eth_utils import is_address

from merkle_rewards.adapters.merkle_tree_adapter.adapter import MerkleTreeAdapter
from merkle_rewards.core.adapters.BaseAdapter import BaseAdapter
from merkle_rewards.core.clients.protocols import ClaimedAmountProvider, DocumentStore
from merkle_rewards.core.constants.merkle import (
    REFERRAL_CODES_COLL,
    REFERRAL_LINK_BASE_URL,
    REFERRAL_REWARDS_COLL,
    REWARDS_COLL,
    USER_ALL_TIME_REWARDS_COLL,
    USER_ALL_TIME_TXN_FEE_REWARDS_DOC,
    USER_CURATION_COLL,
    USER_REWARDS_COLL,
    USER_REWARD_PHASES_COLL,
    USERS_COLL,
)
from merkle_rewards.core.errors import AirdropTypeError, NoActivePhaseError
from merkle_rewards.core.models.merkle import AirdropType, ClaimResult
from merkle_rewards.core.models.rewards import (
    CurationTotals,
    Phase,
    ReferralTotals,
    RewardsProgram,
    RewardTotals,
    TradingRefundTotals,
    TransactionFeeTotals,
    UserPhaseReward,
    UserRewards,
)
from merkle_rewards.core.store.refs import collection
from merkle_rewards.core.utils.phases import (
    active_phase,
    inactive_phases,
    normalize_phases,
)
from merkle_rewards.core.utils.tasks import gather_or_cancel


class RewardsAdapter(BaseAdapter):
    adapter_type = "REWARDS"

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        store: DocumentStore,
        claimed_provider: ClaimedAmountProvider | None = None,
        merkle_tree_adapter: MerkleTreeAdapter | None = None,
    ) -> None:
        super().__init__("rewards_adapter", config or {}, store=store)
        self.merkle_tree = merkle_tree_adapter or MerkleTreeAdapter(
            self.config, store=store, claimed_provider=claimed_provider
        )

    async def get_programs(self, chain_id: int) -> RewardsProgram | None:
        data = await self._get_document(collection(REWARDS_COLL).doc(int(chain_id)))
        if data is None:
            return None
        return RewardsProgram.model_validate(data)

    async def get_phases(self, chain_id: int) -> list[Phase]:
        program = await self.get_programs(chain_id)
        if program is None:
            return []
        phases = normalize_phases(program.phases)
        active = [p for p in program.phases if p.is_active]
        if len(active) > 1:
            self.logger.warning(
                f"Rewards program for chain {chain_id} has {len(active)} active phases; "
                f"using {active[0].id}"
            )
        return phases

    async def get_active_phase(self, chain_id: int) -> Phase:
        phase = active_phase(await self.get_phases(chain_id))
        if phase is None:
            raise NoActivePhaseError(chain_id)
        return phase

    async def get_inactive_phases(self, chain_id: int) -> list[Phase]:
        return inactive_phases(await self.get_phases(chain_id))

    async def get_curation_totals(self, chain_id: int, user: str) -> CurationTotals:
        ref = (
            collection(USERS_COLL)
            .doc(user)
            .collection(USER_CURATION_COLL)
            .doc(int(chain_id))
        )
        data = await self._get_document(ref)
        return CurationTotals.model_validate(data or {})

    async def get_transaction_fee_totals(
        self, chain_id: int, user: str
    ) -> TransactionFeeTotals:
        ref = (
            collection(USERS_COLL)
            .doc(user)
            .collection(USER_REWARDS_COLL)
            .doc(int(chain_id))
            .collection(USER_ALL_TIME_REWARDS_COLL)
            .doc(USER_ALL_TIME_TXN_FEE_REWARDS_DOC)
        )
        data = await self._get_document(ref)
        return TransactionFeeTotals.model_validate(data or {})

    async def get_user_phase_rewards(
        self, chain_id: int, user: str
    ) -> list[UserPhaseReward]:
        coll = (
            collection(USERS_COLL)
            .doc(user)
            .collection(USER_REWARDS_COLL)
            .doc(int(chain_id))
            .collection(USER_REWARD_PHASES_COLL)
        )
        phases, docs = await asyncio.gather(
            self.get_phases(chain_id), self._list_documents(coll)
        )
        by_name: dict[str, dict[str, Any]] = {}
        for doc in docs:
            if isinstance(doc.get("phase"), str):
                by_name.setdefault(doc["phase"], doc)

        out: list[UserPhaseReward] = []
        for phase in phases:
            doc = by_name.get(phase.name, {})
            settings = phase.model_extra or {}
            out.append(
                UserPhaseReward(
                    id=phase.id,
                    name=phase.name,
                    is_active=phase.is_active,
                    user_volume=doc.get("volume") or 0,
                    user_rewards=doc.get("rewards") or 0,
                    user_sells=doc.get("userSells") or 0,
                    user_buys=doc.get("userBuys") or 0,
                    trading_fee=settings.get("tradingFee"),
                    nft_reward=settings.get("nftReward"),
                    curation=settings.get("curation"),
                )
            )
        return out

    async def get_referral_totals(self, user: str) -> ReferralTotals:
        rewards_doc, codes = await asyncio.gather(
            self._get_document(collection(REFERRAL_REWARDS_COLL).doc(user)),
            self._query_documents(
                collection(REFERRAL_CODES_COLL), "owner.address", user
            ),
        )
        referral_code = str(codes[0].get("referralCode") or "") if codes else ""
        return ReferralTotals(
            referral_link=f"{REFERRAL_LINK_BASE_URL}{referral_code}",
            num_referrals=int((rewards_doc or {}).get("numberOfReferrals") or 0),
        )

    async def _get_airdrop_claim(
        self, chain_id: int, airdrop_type: AirdropType, user: str
    ) -> ClaimResult:
        try:
            return await self.merkle_tree.get_claim(chain_id, airdrop_type, user)
        except Exception as exc:
            raise AirdropTypeError(str(airdrop_type), str(exc)) from exc

    async def _settle_airdrop_claim(
        self, chain_id: int, airdrop_type: AirdropType, user: str, *, strict: bool
    ) -> ClaimResult | AirdropTypeError:
        try:
            return await self._get_airdrop_claim(chain_id, airdrop_type, user)
        except AirdropTypeError as exc:
            if strict:
                raise
            return exc

    async def get_user_rewards(
        self, chain_id: int, user: str, *, strict: bool = True
    ) -> UserRewards:
        """Combine every airdrop claim with the user's off-chain totals.

        All reads run concurrently and the first failure cancels the rest.
        With ``strict=False`` a failing airdrop type leaves its ``claim`` empty
        and is reported in ``errors``; failures of the off-chain totals always
        raise.
        """
        if not is_address(user):
            raise ValueError(f"Invalid user address: {user}")
        user = user.lower()

        airdrop_types = (AirdropType.TRADING_REFUND, AirdropType.CURATION)
        outcomes = await gather_or_cancel(
            *(
                self._settle_airdrop_claim(chain_id, t, user, strict=strict)
                for t in airdrop_types
            ),
            self.get_curation_totals(chain_id, user),
            self.get_transaction_fee_totals(chain_id, user),
            self.get_referral_totals(user),
            self.get_user_phase_rewards(chain_id, user),
        )
        claim_outcomes = dict(zip(airdrop_types, outcomes[: len(airdrop_types)]))
        curation, txn_fees, referrals, phase_rewards = outcomes[len(airdrop_types) :]

        claims: dict[AirdropType, ClaimResult | None] = {}
        errors: dict[str, str] = {}
        for airdrop_type, outcome in claim_outcomes.items():
            if isinstance(outcome, AirdropTypeError):
                self.logger.warning(f"Degrading {airdrop_type.name} rewards: {outcome}")
                claims[airdrop_type] = None
                errors[str(airdrop_type)] = str(outcome)
            else:
                claims[airdrop_type] = outcome

        return UserRewards(
            chain_id=chain_id,
            user=user,
            totals=RewardTotals(
                trading_refund=TradingRefundTotals(
                    **txn_fees.model_dump(),
                    claim=claims[AirdropType.TRADING_REFUND],
                ),
                curation=curation.model_copy(
                    update={"claim": claims[AirdropType.CURATION]}
                ),
                referrals=referrals,
            ),
            phase_rewards=phase_rewards,
            errors=errors,
        )
