import random
import time
from datetime import datetime
from pathlib import Path

from tqdm import tqdm
from web3 import Web3


def checksum_address(value: str, strict: bool = False) -> str | None:
    """
    Return the EIP-55 form of `value`, or None when it is not a valid address.

    All-lowercase and all-uppercase hex carry no checksum and are accepted,
    mixed case must match the checksum. With `strict` only checksummed input passes.
    """
    if not isinstance(value, str):
        return None

    value = value.strip()
    if not value.startswith("0x"):
        return None

    if strict:
        return value if Web3.is_checksum_address(value) else None

    if not Web3.is_address(value):
        return None

    digits = value[2:]
    if digits != digits.lower() and digits != digits.upper() and not Web3.is_checksum_address(value):
        return None

    return Web3.to_checksum_address(value)


def truncate(address: str, chars: int = 4) -> str:
    """
    Truncates an Ethereum address to the format 0x1234...abcd.
    """
    parsed = checksum_address(address)
    if not parsed:
        raise ValueError(f"Invalid address {address!r}")

    return f"{parsed[:chars + 2]}...{parsed[-chars:]}"


def read_lines(path: str | Path) -> list[str]:
    with open(path) as file:
        return [row.strip() for row in file if row.strip()]


def sleep(sleep_time, to_sleep=None, label="Sleep until next chunk"):
    if to_sleep is not None:
        x = random.randint(sleep_time, to_sleep)
    else:
        x = sleep_time

    desc = datetime.now().strftime("%H:%M:%S")

    for _ in tqdm(
        range(x), desc=desc, bar_format=f"{{desc}} | {label} {{n_fmt}}/{{total_fmt}}"
    ):
        time.sleep(1)

    print()
