import json
from pathlib import Path

from web3 import Web3
from web3.contract import Contract

from data.const import NATIVE_DECIMALS
from models.network import Network
from modules.exceptions import TokenInfoError
from modules.logger import logger

ABI_DIR = Path(__file__).resolve().parent.parent / "data" / "abi"

with open(ABI_DIR / "erc20.json") as file:
    ERC20_ABI = json.load(file)


class TokenInfoProvider:
    """
    Read-only token metadata over web3, cached per token address.
    """

    def __init__(self, w3: Web3, chain: Network, known: dict[str, int] = None):
        self.w3 = w3
        self.chain = chain
        self._decimals: dict[str, int] = dict(known or {})
        self._symbols: dict[str, str] = {}

    def get_contract(self, address: str) -> Contract:
        return self.w3.eth.contract(address=self.w3.to_checksum_address(address), abi=ERC20_ABI)

    def decimals(self, token_addr: str = None) -> int:
        if token_addr is None:
            return NATIVE_DECIMALS

        if token_addr not in self._decimals:
            try:
                self._decimals[token_addr] = self.get_contract(token_addr).functions.decimals().call()
            except Exception as err:
                raise TokenInfoError(f"could not fetch decimals of {token_addr}: {err}") from err

            logger.debug(f"{token_addr} has {self._decimals[token_addr]} decimals")

        return self._decimals[token_addr]

    def symbol(self, token_addr: str = None) -> str:
        """
        Token symbol for display, falls back to the address when the call fails.
        """
        if token_addr is None:
            return self.chain.native_token

        if token_addr not in self._symbols:
            try:
                self._symbols[token_addr] = self.get_contract(token_addr).functions.symbol().call()
            except Exception as err:
                logger.debug(f"No symbol for {token_addr}: {err}")
                return token_addr

        return self._symbols[token_addr]
