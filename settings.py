# Network to use, see data/const.py for the available chains
CHAIN = "ethereum"

# Safe (multisig) that holds the tokens and submits the batches
SAFE_ADDRESS = ""

# Owner key of the Safe is read from this file, one key per line
KEYS_FILE = "keys.txt"

# Transfers sheet: token_type,token_address,receiver,amount,token_id
CSV_PATH = "transfers.csv"

# Chunking of erc20/native transfers
MAX_CHUNK_SIZE = 400  # 400 | 200
DECREMENT_CHUNK_SIZE = True

# "first_chunk" - collectibles go out once, together with chunk 1
# "standalone" - collectibles are sent as their own batch after the last chunk
COLLECTIBLE_PLACEMENT = "first_chunk"

# Reject addresses that are not already EIP-55 checksummed
STRICT_CHECKSUM = False

# Write Safe Transaction Builder files instead of sending to the Safe
EXPORT_ONLY = False
EXPORT_DIR = "batches"

# Sleep range in seconds between chunks when submitting all of them
SLEEP_BETWEEN_CHUNKS = [10, 20]

# Gas & retries for direct execution (threshold 1 Safes)
GWEI_MULTIPLIER = 1.2
MAX_RETRY = 5
RETRY_DELAY = 3
RECEIPT_TIMEOUT = 120

LOG_LEVEL = "INFO"
LOG_FILE = "logs/airdrop.log"
