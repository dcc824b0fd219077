import copy

import pytest

import merkle_rewards.core.config as rewards_config
from merkle_rewards.core.store.memory import InMemoryDocumentStore
from merkle_rewards.testing.fakes import FakeClaimedAmountProvider


def pytest_configure(config):
    config.addinivalue_line("markers", "smoke: mark test as a smoke test")
    config.addinivalue_line("markers", "integration: mark test as integration")


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "smoke" in item.nodeid:
            item.add_marker(pytest.mark.smoke)


@pytest.fixture
def restore_global_config():
    original = copy.deepcopy(rewards_config.CONFIG)
    yield
    rewards_config.set_config(original)


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def fake_provider() -> FakeClaimedAmountProvider:
    return FakeClaimedAmountProvider()
