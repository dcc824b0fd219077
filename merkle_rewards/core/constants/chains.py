CHAIN_ID_ETHEREUM = 1
CHAIN_ID_GOERLI = 5
CHAIN_ID_SEPOLIA = 11155111
CHAIN_ID_POLYGON = 137

CHAIN_CODE_TO_ID = {
    "ethereum": CHAIN_ID_ETHEREUM,
    "mainnet": CHAIN_ID_ETHEREUM,
    "goerli": CHAIN_ID_GOERLI,
    "sepolia": CHAIN_ID_SEPOLIA,
    "polygon": CHAIN_ID_POLYGON,
}

POA_MIDDLEWARE_CHAIN_IDS: set[int] = {
    CHAIN_ID_POLYGON,
}
