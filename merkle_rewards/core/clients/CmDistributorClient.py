from __future__ import annotations

import asyncio

from eth_utils import is_address, to_checksum_address
from loguru import logger
from web3.exceptions import ContractLogicError

from merkle_rewards.core.config import (
    get_distributor_address_overrides,
    get_rpc_max_retries,
    get_rpc_timeout_s,
)
from merkle_rewards.core.constants.base import ZERO_ADDRESS
from merkle_rewards.core.constants.cm_distributor_abi import CM_DISTRIBUTOR_ABI
from merkle_rewards.core.constants.cm_distributor_contracts import (
    CM_DISTRIBUTOR_BY_CHAIN,
)
from merkle_rewards.core.errors import OnChainQueryError, UnsupportedChainError
from merkle_rewards.core.models.merkle import Denomination
from merkle_rewards.core.utils.amounts import parse_wei
from merkle_rewards.core.utils.retry import retry_async
from merkle_rewards.core.utils.web3 import web3_from_chain_id

DENOMINATION_FUNCTIONS: dict[Denomination, str] = {
    Denomination.ETH: "cumulativeETHClaimed",
    Denomination.TOKEN: "cumulativeINFTClaimed",
}


def _is_transient(exc: Exception) -> bool:
    # A revert is deterministic for the same block.
    return not isinstance(exc, ContractLogicError)


class CmDistributorClient:
    def __init__(
        self, *, timeout_s: float | None = None, max_retries: int | None = None
    ) -> None:
        self._timeout_s = timeout_s
        self._max_retries = max_retries

    @property
    def timeout_s(self) -> float:
        return self._timeout_s if self._timeout_s is not None else get_rpc_timeout_s()

    @property
    def max_retries(self) -> int:
        return (
            self._max_retries
            if self._max_retries is not None
            else get_rpc_max_retries()
        )

    def get_distributor_address(self, chain_id: int) -> str:
        chain_id = int(chain_id)
        address = get_distributor_address_overrides().get(
            chain_id
        ) or CM_DISTRIBUTOR_BY_CHAIN.get(chain_id)
        if not address or not is_address(address) or address.lower() == ZERO_ADDRESS:
            raise UnsupportedChainError(chain_id)
        return to_checksum_address(address)

    async def _call_cumulative_claimed(
        self, chain_id: int, distributor_address: str, fn_name: str, user_address: str
    ) -> int:
        async with web3_from_chain_id(chain_id) as web3:
            contract = web3.eth.contract(
                address=to_checksum_address(distributor_address),
                abi=CM_DISTRIBUTOR_ABI,
            )
            fn = getattr(contract.functions, fn_name)
            return int(await fn(to_checksum_address(user_address)).call())

    async def get_cumulative_claimed(
        self,
        chain_id: int,
        distributor_address: str,
        denomination: str,
        user_address: str,
    ) -> str:
        fn_name = DENOMINATION_FUNCTIONS[Denomination(denomination)]

        async def _attempt() -> int:
            async with asyncio.timeout(self.timeout_s):
                return await self._call_cumulative_claimed(
                    chain_id, distributor_address, fn_name, user_address
                )

        try:
            amount = await retry_async(
                _attempt,
                max_retries=self.max_retries,
                should_retry=_is_transient,
                label=f"{fn_name}({user_address}) chain={chain_id}",
            )
        except Exception as exc:
            logger.error(f"{fn_name} failed on chain {chain_id}: {exc!r}")
            raise OnChainQueryError(
                chain_id=chain_id,
                denomination=str(denomination),
                user_address=user_address,
            ) from exc
        return str(parse_wei(amount))


CM_DISTRIBUTOR_CLIENT = CmDistributorClient()
