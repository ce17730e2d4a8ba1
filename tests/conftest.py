"""Shared fixtures: fake token metadata and wallet hosts, known addresses."""
import asyncio

import pytest

from models.transaction import SubmissionStatus
from modules.exceptions import TokenInfoError

# EIP-55 reference addresses
SAFE = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
ALICE = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
BOB = "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB"
CAROL = "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb"
DAVE = "0x52908400098527886E0F7030069857D2E4169EE7"

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
NFT = "0x8617E340B3D01FA5F11F306F4090FD50E238070D"


class FakeTokenInfo:
    def __init__(self, decimals: dict[str, int] = None):
        self._decimals = decimals if decimals is not None else {USDC: 6, DAI: 18}
        self.calls = []

    def decimals(self, token_addr: str = None) -> int:
        self.calls.append(token_addr)
        if token_addr is None:
            return 18
        if token_addr not in self._decimals:
            raise TokenInfoError(f"could not fetch decimals of {token_addr}")
        return self._decimals[token_addr]

    def symbol(self, token_addr: str = None) -> str:
        return {None: "ETH", USDC: "USDC", DAI: "DAI"}.get(token_addr, token_addr)


class FakeHost:
    """
    Records every bundle; `fail_next` makes the next submit raise.
    """

    def __init__(self, accepted: bool = True):
        self.accepted = accepted
        self.fail_next = None
        self.bundles = []

    async def submit(self, txs):
        await asyncio.sleep(0)
        if self.fail_next:
            err, self.fail_next = self.fail_next, None
            raise err
        self.bundles.append(list(txs))
        return f"0x{len(self.bundles):064x}"

    async def get_status(self, handle):
        await asyncio.sleep(0)
        return SubmissionStatus(accepted=self.accepted, tx_hash=handle if self.accepted else None)


def erc20_row(receiver=ALICE, amount="1", token=USDC):
    return {"token_type": "erc20", "token_address": token, "receiver": receiver, "amount": amount}


def native_row(receiver=ALICE, amount="1"):
    return {"token_type": "native", "token_address": "", "receiver": receiver, "amount": amount}


def nft_row(receiver=ALICE, token_id="1", token_type="erc721", amount=""):
    return {
        "token_type": token_type,
        "token_address": NFT,
        "receiver": receiver,
        "amount": amount,
        "token_id": token_id,
    }


@pytest.fixture()
def token_info():
    return FakeTokenInfo()


@pytest.fixture()
def host():
    return FakeHost()
