from __future__ import annotations


def reconcile(entitlement: int, claimed: int) -> int:
    """Claimable delta between a cumulative entitlement and the on-chain claimed total.

    Negative results are returned as-is: the distributor contract, not this
    function, decides what can actually be claimed.
    """
    for value in (entitlement, claimed):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(
                f"reconcile expects int wei amounts, got {type(value).__name__}"
            )
    return entitlement - claimed
