from __future__ import annotations

import asyncio
from typing import Any

from merkle_rewards.core.adapters.BaseAdapter import BaseAdapter
from merkle_rewards.core.clients.CmDistributorClient import CM_DISTRIBUTOR_CLIENT
from merkle_rewards.core.clients.protocols import ClaimedAmountProvider, DocumentStore
from merkle_rewards.core.constants.merkle import (
    MERKLE_ROOT_VERSION_LEAVES_COLL,
    MERKLE_ROOT_VERSIONS_COLL,
    MERKLE_ROOTS_COLL,
)
from merkle_rewards.core.models.merkle import (
    AIRDROP_DENOMINATIONS,
    AirdropType,
    ClaimResult,
    MerkleLeaf,
    MerkleRootConfig,
    MerkleRootVersion,
    default_claim_result,
    default_merkle_root_config,
)
from merkle_rewards.core.store.refs import DocumentRef, collection
from merkle_rewards.core.utils.amounts import parse_wei
from merkle_rewards.core.utils.reconcile import reconcile


class MerkleTreeAdapter(BaseAdapter):
    """Read side of the cumulative Merkle drop.

    Resolves the published tree for an airdrop program, finds a user's leaf in
    it and reconciles the entitlement against what the distributor contract
    says was already claimed. Nothing here writes or verifies proofs.
    """

    adapter_type = "MERKLE_TREE"

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        store: DocumentStore,
        claimed_provider: ClaimedAmountProvider | None = None,
    ) -> None:
        super().__init__("merkle_tree_adapter", config or {}, store=store)
        self.claimed_provider: ClaimedAmountProvider = (
            claimed_provider or CM_DISTRIBUTOR_CLIENT
        )

    def config_ref(
        self, chain_id: int, airdrop_type: AirdropType | str, distributor_address: str
    ) -> DocumentRef:
        doc_id = f"{AirdropType(airdrop_type)}:{int(chain_id)}:{distributor_address}"
        return collection(MERKLE_ROOTS_COLL).doc(doc_id)

    def resolve_version(self, config: MerkleRootConfig, nonce: int) -> DocumentRef:
        # Path derivation only; a missing version shows up as a missing leaf.
        config_ref = self.config_ref(
            config.config.chain_id,
            config.config.type,
            config.config.airdrop_contract_address,
        )
        return config_ref.collection(MERKLE_ROOT_VERSIONS_COLL).doc(int(nonce))

    def leaf_ref(self, version_ref: DocumentRef, user_address: str) -> DocumentRef:
        return version_ref.collection(MERKLE_ROOT_VERSION_LEAVES_COLL).doc(
            user_address.lower()
        )

    async def get_config(
        self, chain_id: int, airdrop_type: AirdropType | str
    ) -> MerkleRootConfig:
        airdrop_type = AirdropType(airdrop_type)
        distributor = self.claimed_provider.get_distributor_address(chain_id)
        ref = self.config_ref(chain_id, airdrop_type, distributor)

        data = await self._get_document(ref)
        if data is None:
            self.logger.debug(
                f"No merkle root published for {ref.id}; using unpublished defaults"
            )
            return default_merkle_root_config(chain_id, airdrop_type, distributor)
        return MerkleRootConfig.model_validate(data)

    async def get_version(self, config: MerkleRootConfig) -> MerkleRootVersion | None:
        data = await self._get_document(self.resolve_version(config, config.nonce))
        if data is None:
            return None
        return MerkleRootVersion.model_validate(data)

    async def _get_cumulative_claimed(
        self, config: MerkleRootConfig, user_address: str
    ) -> int:
        claimed = await self.claimed_provider.get_cumulative_claimed(
            config.config.chain_id,
            config.config.airdrop_contract_address,
            AIRDROP_DENOMINATIONS[config.airdrop_type],
            user_address,
        )
        return parse_wei(claimed)

    async def get_leaf(
        self, config: MerkleRootConfig | None, user_address: str
    ) -> ClaimResult:
        if config is None:
            return default_claim_result(None, user_address)

        version_ref = self.resolve_version(config, config.nonce)
        leaf_ref = self.leaf_ref(version_ref, user_address)

        leaf_data, cumulative_claimed = await asyncio.gather(
            self._get_document(leaf_ref),
            self._get_cumulative_claimed(config, user_address),
        )

        if leaf_data is None:
            # The on-chain total is intentionally not reported when there is no leaf.
            if cumulative_claimed:
                self.logger.debug(
                    f"No leaf for {user_address} at nonce {config.nonce}; "
                    f"on-chain claimed {cumulative_claimed} not reported"
                )
            return default_claim_result(config, user_address)

        leaf = MerkleLeaf.model_validate(leaf_data)
        claimable = reconcile(leaf.cumulative_amount_wei, cumulative_claimed)
        if claimable < 0:
            self.logger.warning(
                f"On-chain claimed exceeds entitlement for {user_address} "
                f"({config.airdrop_type.name}, nonce {config.nonce}): claimable={claimable}"
            )

        return ClaimResult.model_validate(
            {
                **leaf.model_dump(),
                "cumulative_claimed": str(cumulative_claimed),
                "claimable": str(claimable),
            }
        )

    async def get_claim(
        self, chain_id: int, airdrop_type: AirdropType | str, user_address: str
    ) -> ClaimResult:
        config = await self.get_config(chain_id, airdrop_type)
        return await self.get_leaf(config, user_address)
