from models.network import Network

ethereum = Network(
    name="ethereum",
    chain_id=1,
    rpc_url="https://rpc.ankr.com/eth",
    explorer="https://etherscan.io",
    eip_1559=True,
    native_token="ETH",
    tx_service_url="https://safe-transaction-mainnet.safe.global",
)

sepolia = Network(
    name="sepolia",
    chain_id=11155111,
    rpc_url="https://rpc.ankr.com/eth_sepolia",
    explorer="https://sepolia.etherscan.io",
    eip_1559=True,
    native_token="ETH",
    tx_service_url="https://safe-transaction-sepolia.safe.global",
)

gnosis = Network(
    name="gnosis",
    chain_id=100,
    rpc_url="https://rpc.gnosischain.com",
    explorer="https://gnosisscan.io",
    eip_1559=True,
    native_token="xDAI",
    tx_service_url="https://safe-transaction-gnosis-chain.safe.global",
)

polygon = Network(
    name="polygon",
    chain_id=137,
    rpc_url="https://rpc.ankr.com/polygon",
    explorer="https://polygonscan.com",
    eip_1559=True,
    native_token="POL",
    tx_service_url="https://safe-transaction-polygon.safe.global",
)

arbitrum = Network(
    name="arbitrum",
    chain_id=42161,
    rpc_url="https://rpc.ankr.com/arbitrum",
    explorer="https://arbiscan.io",
    eip_1559=True,
    native_token="ETH",
    tx_service_url="https://safe-transaction-arbitrum.safe.global",
)

optimism = Network(
    name="optimism",
    chain_id=10,
    rpc_url="https://rpc.ankr.com/optimism",
    explorer="https://optimistic.etherscan.io",
    eip_1559=True,
    native_token="ETH",
    tx_service_url="https://safe-transaction-optimism.safe.global",
)

base = Network(
    name="base",
    chain_id=8453,
    rpc_url="https://mainnet.base.org",
    explorer="https://basescan.org",
    eip_1559=True,
    native_token="ETH",
    tx_service_url="https://safe-transaction-base.safe.global",
)

bsc = Network(
    name="bsc",
    chain_id=56,
    rpc_url="https://rpc.ankr.com/bsc",
    explorer="https://bscscan.com",
    eip_1559=False,
    native_token="BNB",
    tx_service_url="https://safe-transaction-bsc.safe.global",
)

CHAIN_MAPPING = {
    "ethereum": ethereum,
    "sepolia": sepolia,
    "gnosis": gnosis,
    "polygon": polygon,
    "arbitrum": arbitrum,
    "optimism": optimism,
    "base": base,
    "bsc": bsc,
}

NATIVE_DECIMALS = 18
