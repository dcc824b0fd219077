# Timeout constants (seconds)
# Every collaborator call is bounded; the reconciliation path never waits on an
# unbounded RPC or document read.
DEFAULT_RPC_TIMEOUT = 10.0
DEFAULT_STORE_TIMEOUT = 10.0

# Total attempts for idempotent on-chain reads (1 call + 1 retry).
DEFAULT_RPC_MAX_RETRIES = 2
DEFAULT_RPC_RETRY_BASE_DELAY_S = 0.25

MANTISSA = 10**18

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
NULL_HASH = "0x0000000000000000000000000000000000000000000000000000000000000000"
