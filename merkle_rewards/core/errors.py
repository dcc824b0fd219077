from __future__ import annotations


class MerkleRewardsError(Exception):
    """Base class for every failure raised by merkle_rewards."""


class DocumentStoreError(MerkleRewardsError):
    def __init__(self, path: str, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"Document store read failed for {path}")


class OnChainQueryError(MerkleRewardsError):
    def __init__(
        self,
        *,
        chain_id: int,
        denomination: str,
        user_address: str,
        message: str | None = None,
    ) -> None:
        self.chain_id = chain_id
        self.denomination = denomination
        self.user_address = user_address
        super().__init__(
            message
            or f"Cumulative {denomination} claimed query failed on chain {chain_id} for {user_address}"
        )


class UnsupportedChainError(MerkleRewardsError):
    def __init__(self, chain_id: int) -> None:
        self.chain_id = chain_id
        super().__init__(f"Chain id {chain_id} is currently not supported!")


class AirdropTypeError(MerkleRewardsError):
    """Failure while reconciling one airdrop type; ``__cause__`` holds the original."""

    def __init__(self, airdrop_type: str, message: str) -> None:
        self.airdrop_type = airdrop_type
        super().__init__(f"[{airdrop_type}] {message}")


class NoActivePhaseError(MerkleRewardsError):
    def __init__(self, chain_id: int) -> None:
        self.chain_id = chain_id
        super().__init__(f"No active phase found for chain {chain_id}")


class InvalidAmountError(MerkleRewardsError, ValueError):
    pass
