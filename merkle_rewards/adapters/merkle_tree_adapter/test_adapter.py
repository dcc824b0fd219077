import asyncio
from unittest.mock import AsyncMock

import pytest

from merkle_rewards.adapters.merkle_tree_adapter.adapter import MerkleTreeAdapter
from merkle_rewards.core.constants.base import NULL_HASH
from merkle_rewards.core.errors import DocumentStoreError, OnChainQueryError
from merkle_rewards.core.models.merkle import (
    AIRDROP_DENOMINATIONS,
    AirdropType,
    CurationDistribution,
    Denomination,
    TradingRefundDistribution,
    default_merkle_root_config,
)
from merkle_rewards.core.store.memory import InMemoryDocumentStore
from merkle_rewards.testing.fakes import (
    TEST_DISTRIBUTOR,
    TEST_ROOT,
    TEST_USER,
    FakeClaimedAmountProvider,
    publish_merkle_tree,
)

CHAIN_ID = 1


def _adapter(store, provider, **config) -> MerkleTreeAdapter:
    return MerkleTreeAdapter(config, store=store, claimed_provider=provider)


def test_adapter_type(memory_store, fake_provider):
    adapter = _adapter(memory_store, fake_provider)
    assert adapter.adapter_type == "MERKLE_TREE"


@pytest.mark.asyncio
@pytest.mark.parametrize("airdrop_type", list(AirdropType))
async def test_get_config_unpublished_returns_defaults(
    memory_store, fake_provider, airdrop_type
):
    adapter = _adapter(memory_store, fake_provider)

    config = await adapter.get_config(CHAIN_ID, airdrop_type)

    assert config.nonce == -1
    assert config.root == NULL_HASH
    assert config.total_cumulative_amount == "0"
    assert config.num_entries == 0
    assert config.updated_at == 0
    assert config.is_published is False
    assert config.config.chain_id == CHAIN_ID
    assert config.config.airdrop_contract_address == TEST_DISTRIBUTOR
    assert set(config.source_amounts.values()) == {"0"}


@pytest.mark.asyncio
async def test_get_config_default_sub_config_matches_type(memory_store, fake_provider):
    adapter = _adapter(memory_store, fake_provider)

    curation = await adapter.get_config(CHAIN_ID, AirdropType.CURATION)
    refund = await adapter.get_config(CHAIN_ID, AirdropType.TRADING_REFUND)

    assert isinstance(curation.config, CurationDistribution)
    assert curation.config.max_timestamp == 0
    assert isinstance(refund.config, TradingRefundDistribution)
    assert refund.config.phase_ids == []


@pytest.mark.asyncio
async def test_get_config_never_writes():
    store = InMemoryDocumentStore()
    store.set = AsyncMock()
    adapter = _adapter(store, FakeClaimedAmountProvider())

    await adapter.get_config(CHAIN_ID, AirdropType.CURATION)

    store.set.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_config_returns_published_document(memory_store, fake_provider):
    await publish_merkle_tree(
        memory_store,
        chain_id=CHAIN_ID,
        airdrop_type=AirdropType.TRADING_REFUND,
        nonce=3,
        leaves={TEST_USER: "1000000000000000000"},
    )
    adapter = _adapter(memory_store, fake_provider)

    config = await adapter.get_config(CHAIN_ID, AirdropType.TRADING_REFUND)

    assert config.nonce == 3
    assert config.root == TEST_ROOT
    assert config.num_entries == 1
    assert config.total_cumulative_amount == "1000000000000000000"
    assert config.is_published is True


def test_config_ref_uses_type_chain_and_distributor(memory_store, fake_provider):
    adapter = _adapter(memory_store, fake_provider)

    ref = adapter.config_ref(CHAIN_ID, AirdropType.CURATION, TEST_DISTRIBUTOR)

    assert ref.path == f"merkleRoots/ETH:1:{TEST_DISTRIBUTOR}"


def test_resolve_version_is_pure_path_derivation(fake_provider):
    store = InMemoryDocumentStore()
    store.get = AsyncMock()
    adapter = _adapter(store, fake_provider)
    config = default_merkle_root_config(
        CHAIN_ID, AirdropType.TRADING_REFUND, TEST_DISTRIBUTOR
    )

    ref = adapter.resolve_version(config, 7)

    assert ref.path == f"merkleRoots/INFT:1:{TEST_DISTRIBUTOR}/merkleRootVersions/7"
    store.get.assert_not_called()


def test_leaf_ref_lowercases_address(memory_store, fake_provider):
    adapter = _adapter(memory_store, fake_provider)
    config = default_merkle_root_config(CHAIN_ID, AirdropType.CURATION, TEST_DISTRIBUTOR)
    version_ref = adapter.resolve_version(config, 0)

    ref = adapter.leaf_ref(version_ref, "0xABCDEF0000000000000000000000000000000001")

    assert ref.id == "0xabcdef0000000000000000000000000000000001"
    assert ref.parent.id == "merkleRootVersionLeaves"


@pytest.mark.asyncio
async def test_get_leaf_end_to_end_nonce_three(memory_store):
    provider = FakeClaimedAmountProvider({"TOKEN": "400000000000000000"})
    config = await publish_merkle_tree(
        memory_store,
        chain_id=CHAIN_ID,
        airdrop_type=AirdropType.TRADING_REFUND,
        nonce=3,
        leaves={TEST_USER: "1000000000000000000"},
    )
    adapter = _adapter(memory_store, provider)

    result = await adapter.get_leaf(config, TEST_USER)

    assert result.nonce == 3
    assert result.cumulative_amount == "1000000000000000000"
    assert result.cumulative_claimed == "400000000000000000"
    assert result.claimable == "600000000000000000"
    assert result.merkle_root == TEST_ROOT
    assert len(result.merkle_proof) == 2


@pytest.mark.asyncio
async def test_get_leaf_uses_exact_integer_arithmetic_above_float_range(memory_store):
    entitlement = 2**200 + 1
    claimed = 2**53 + 1
    provider = FakeClaimedAmountProvider({"ETH": str(claimed)})
    config = await publish_merkle_tree(
        memory_store,
        chain_id=CHAIN_ID,
        airdrop_type=AirdropType.CURATION,
        nonce=0,
        leaves={TEST_USER: str(entitlement)},
    )
    adapter = _adapter(memory_store, provider)

    result = await adapter.get_leaf(config, TEST_USER)

    assert result.claimable == str(entitlement - claimed)
    assert result.claimable_wei == entitlement - claimed
    assert result.claimable != str(int(float(entitlement) - float(claimed)))


@pytest.mark.asyncio
async def test_get_leaf_reports_negative_claimable_unclamped(memory_store):
    provider = FakeClaimedAmountProvider({"TOKEN": "250"})
    config = await publish_merkle_tree(
        memory_store,
        chain_id=CHAIN_ID,
        airdrop_type=AirdropType.TRADING_REFUND,
        nonce=1,
        leaves={TEST_USER: "100"},
    )
    adapter = _adapter(memory_store, provider)

    result = await adapter.get_leaf(config, TEST_USER)

    assert result.claimable == "-150"


@pytest.mark.asyncio
async def test_get_leaf_missing_leaf_pins_claimed_to_zero(memory_store):
    provider = FakeClaimedAmountProvider({"TOKEN": "250000000000000000"})
    config = await publish_merkle_tree(
        memory_store,
        chain_id=CHAIN_ID,
        airdrop_type=AirdropType.TRADING_REFUND,
        nonce=2,
        leaves={"0x2222222222222222222222222222222222222222": "5"},
    )
    adapter = _adapter(memory_store, provider)

    result = await adapter.get_leaf(config, TEST_USER)

    # The on-chain total was fetched but is deliberately not reported.
    assert provider.calls == [(CHAIN_ID, TEST_DISTRIBUTOR, "TOKEN", TEST_USER)]
    assert result.cumulative_amount == "0"
    assert result.cumulative_claimed == "0"
    assert result.claimable == "0"
    assert result.nonce == 2
    assert result.expected_merkle_root == TEST_ROOT
    assert result.proof == []


@pytest.mark.asyncio
async def test_get_leaf_unpublished_program_returns_zero_entitlement(
    memory_store, fake_provider
):
    adapter = _adapter(memory_store, fake_provider)
    config = await adapter.get_config(CHAIN_ID, AirdropType.CURATION)

    result = await adapter.get_leaf(config, TEST_USER)

    assert result.nonce == -1
    assert result.expected_merkle_root == NULL_HASH
    assert result.claimable == "0"


@pytest.mark.asyncio
async def test_get_leaf_without_config_skips_chain_query(memory_store, fake_provider):
    adapter = _adapter(memory_store, fake_provider)

    result = await adapter.get_leaf(None, TEST_USER)

    assert fake_provider.calls == []
    assert result.cumulative_claimed == "0"
    assert result.claimable == "0"
    assert result.address == TEST_USER


@pytest.mark.asyncio
async def test_get_leaf_is_idempotent(memory_store):
    provider = FakeClaimedAmountProvider({"ETH": "7"})
    config = await publish_merkle_tree(
        memory_store,
        chain_id=CHAIN_ID,
        airdrop_type=AirdropType.CURATION,
        nonce=4,
        leaves={TEST_USER: "10"},
    )
    adapter = _adapter(memory_store, provider)

    first = await adapter.get_leaf(config, TEST_USER)
    second = await adapter.get_leaf(config, TEST_USER)

    assert first == second
    assert first.to_document() == second.to_document()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "airdrop_type,expected",
    [
        (AirdropType.CURATION, "ETH"),
        (AirdropType.TRADING_REFUND, "TOKEN"),
    ],
)
async def test_get_leaf_selects_accessor_by_airdrop_type(
    memory_store, fake_provider, airdrop_type, expected
):
    adapter = _adapter(memory_store, fake_provider)
    config = await adapter.get_config(CHAIN_ID, airdrop_type)

    await adapter.get_leaf(config, TEST_USER)

    assert fake_provider.denominations_called == [expected]


def test_every_airdrop_type_has_a_denomination():
    assert set(AIRDROP_DENOMINATIONS) == set(AirdropType)
    assert AIRDROP_DENOMINATIONS[AirdropType.CURATION] == Denomination.ETH
    others = [t for t in AirdropType if t != AirdropType.CURATION]
    assert all(AIRDROP_DENOMINATIONS[t] == Denomination.TOKEN for t in others)


@pytest.mark.asyncio
async def test_get_leaf_propagates_on_chain_failure(memory_store):
    error = OnChainQueryError(chain_id=CHAIN_ID, denomination="TOKEN", user_address=TEST_USER)
    provider = FakeClaimedAmountProvider(errors={"TOKEN": error})
    config = await publish_merkle_tree(
        memory_store,
        chain_id=CHAIN_ID,
        airdrop_type=AirdropType.TRADING_REFUND,
        nonce=1,
        leaves={TEST_USER: "100"},
    )
    adapter = _adapter(memory_store, provider)

    with pytest.raises(OnChainQueryError) as exc_info:
        await adapter.get_leaf(config, TEST_USER)

    assert exc_info.value is error


@pytest.mark.asyncio
async def test_get_config_store_timeout_raises_document_store_error(fake_provider):
    class _SlowStore(InMemoryDocumentStore):
        async def get(self, ref):
            await asyncio.sleep(1)
            return None

    adapter = _adapter(_SlowStore(), fake_provider, store_timeout_s=0.01)

    with pytest.raises(DocumentStoreError) as exc_info:
        await adapter.get_config(CHAIN_ID, AirdropType.CURATION)

    assert "timed out" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, TimeoutError)


@pytest.mark.asyncio
async def test_get_config_store_failure_is_typed(fake_provider):
    store = InMemoryDocumentStore()
    store.get = AsyncMock(side_effect=ConnectionError("unavailable"))
    adapter = _adapter(store, fake_provider)

    with pytest.raises(DocumentStoreError) as exc_info:
        await adapter.get_config(CHAIN_ID, AirdropType.CURATION)

    assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.asyncio
async def test_get_leaf_fetches_leaf_and_claimed_concurrently():
    chain_started = asyncio.Event()

    class _WaitingStore(InMemoryDocumentStore):
        async def get(self, ref):
            if "merkleRootVersionLeaves" in ref.path:
                # Only completes if the chain query was started alongside it.
                await chain_started.wait()
            return await super().get(ref)

    class _SignallingProvider(FakeClaimedAmountProvider):
        async def get_cumulative_claimed(self, *args, **kwargs):
            chain_started.set()
            return await super().get_cumulative_claimed(*args, **kwargs)

    store = _WaitingStore()
    provider = _SignallingProvider({"ETH": "1"})
    config = await publish_merkle_tree(
        store,
        chain_id=CHAIN_ID,
        airdrop_type=AirdropType.CURATION,
        nonce=0,
        leaves={TEST_USER: "3"},
    )
    adapter = _adapter(store, provider)

    result = await asyncio.wait_for(adapter.get_leaf(config, TEST_USER), timeout=1)

    assert result.claimable == "2"


@pytest.mark.asyncio
async def test_get_claim_resolves_config_then_leaf(memory_store):
    provider = FakeClaimedAmountProvider({"ETH": "1"})
    await publish_merkle_tree(
        memory_store,
        chain_id=CHAIN_ID,
        airdrop_type=AirdropType.CURATION,
        nonce=5,
        leaves={TEST_USER: "11"},
    )
    adapter = _adapter(memory_store, provider)

    result = await adapter.get_claim(CHAIN_ID, AirdropType.CURATION, TEST_USER)

    assert result.nonce == 5
    assert result.claimable == "10"


@pytest.mark.asyncio
async def test_get_version_reads_published_version(memory_store, fake_provider):
    config = await publish_merkle_tree(
        memory_store,
        chain_id=CHAIN_ID,
        airdrop_type=AirdropType.TRADING_REFUND,
        nonce=2,
        leaves={TEST_USER: "1"},
    )
    adapter = _adapter(memory_store, fake_provider)

    version = await adapter.get_version(config)
    missing = await adapter.get_version(
        config.model_copy(update={"nonce": 9})
    )

    assert version is not None
    assert version.nonce == 2
    assert version.root == config.root
    assert missing is None
