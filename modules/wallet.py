import asyncio
import json
import time
from pathlib import Path
from typing import Sequence

import requests
from eth_abi import encode
from eth_abi.packed import encode_packed
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import HTTPProvider, Web3
from web3.middleware import ExtraDataToPOAMiddleware

import settings
from data.const import ethereum
from models.network import Network
from models.transaction import SubmissionStatus, Transaction
from modules.exceptions import WalletError
from modules.logger import logger
from modules.transactions import selector
from modules.utils import truncate

ABI_DIR = Path(__file__).resolve().parent.parent / "data" / "abi"

with open(ABI_DIR / "safe.json") as file:
    SAFE_ABI = json.load(file)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
CALL = 0
DELEGATE_CALL = 1

MULTISEND = selector("multiSend(bytes)")


def encode_multisend(txs: Sequence[Transaction]) -> bytes:
    """
    Pack transactions into a MultiSend `multiSend(bytes)` call.

    Each entry is operation (1 byte), to (20), value (32), data length (32), data.
    """
    packed = b"".join(
        encode_packed(
            ["uint8", "address", "uint256", "uint256", "bytes"],
            [CALL, tx.to, tx.value, len(tx.data), tx.data],
        )
        for tx in txs
    )
    return MULTISEND + encode(["bytes"], [packed])


class SafeWallet:
    """
    Sends bundles through a Safe owned by the configured key.

    A bundle becomes one delegate call to MultiSendCallOnly, so all of its
    transfers go through or none do. With a 1/1 Safe the owner executes it right
    away, otherwise it is proposed to the Safe Transaction Service for the other
    owners to sign.
    """

    def __init__(self, private_key: str, safe_address: str, chain: Network = ethereum):
        self.account: LocalAccount = Account.from_key(private_key)
        self.address = self.account.address

        self.chain = chain
        self.w3 = Web3(HTTPProvider(chain.rpc_url))
        self.w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        self.safe_address = self.w3.to_checksum_address(safe_address)
        self.safe = self.w3.eth.contract(address=self.safe_address, abi=SAFE_ABI)
        self.label = f"Safe {truncate(self.safe_address)} |"

        self._proposed: set[str] = set()

    def __str__(self):
        return f"SafeWallet(safe={self.safe_address}, owner={self.address})"

    def build_safe_tx(self, txs: Sequence[Transaction], nonce: int) -> dict:
        return {
            "to": self.w3.to_checksum_address(self.chain.multisend_address),
            "value": 0,
            "data": encode_multisend(txs),
            "operation": DELEGATE_CALL,
            "safeTxGas": 0,
            "baseGas": 0,
            "gasPrice": 0,
            "gasToken": ZERO_ADDRESS,
            "refundReceiver": ZERO_ADDRESS,
            "nonce": nonce,
        }

    def get_safe_tx_hash(self, safe_tx: dict) -> bytes:
        return self.safe.functions.getTransactionHash(*safe_tx.values()).call()

    def sign_safe_tx(self, safe_tx_hash: bytes) -> bytes:
        # r + s + v, v = 27/28 marks a plain ECDSA signature of the safe tx hash
        return bytes(self.account.unsafe_sign_hash(safe_tx_hash).signature)

    def submit_bundle(self, txs: Sequence[Transaction]) -> str:
        """
        Returns the chain tx hash (executed) or the safe tx hash (proposed).
        """
        if not txs:
            raise WalletError("Nothing to submit")

        threshold = self.safe.functions.getThreshold().call()
        nonce = self.safe.functions.nonce().call()

        if threshold > 1:
            nonce = self.next_queued_nonce(nonce)

        safe_tx = self.build_safe_tx(txs, nonce)
        safe_tx_hash = self.get_safe_tx_hash(safe_tx)
        signature = self.sign_safe_tx(safe_tx_hash)

        logger.debug(f"{self.label} {len(txs)} txs, nonce {nonce}, threshold {threshold}")

        if threshold == 1:
            return self.execute(safe_tx, signature)

        return self.propose(safe_tx, safe_tx_hash, signature)

    def get_tx_data(self, value: int = 0, **kwargs):
        """
        Build a transaction dict.
        """
        return {
            "chainId": self.w3.eth.chain_id,
            "from": self.address,
            "nonce": self.w3.eth.get_transaction_count(self.address),
            "value": value,
            **kwargs,
        }

    def get_gas(self, tx: dict, gwei_multiplier: float = settings.GWEI_MULTIPLIER) -> dict:
        """
        Populate tx with either EIP-1559 or legacy gas parameters and estimate gas.
        """
        gas_price_legacy = self.w3.eth.gas_price

        if self.chain.eip_1559:
            max_priority_fee = self.w3.eth.max_priority_fee
            latest_block = self.w3.eth.get_block("latest")
            base_fee = int(
                max(gas_price_legacy, latest_block["baseFeePerGas"]) * gwei_multiplier
            )

            tx.pop("gasPrice", None)
            tx["maxFeePerGas"] = max_priority_fee + base_fee
            tx["maxPriorityFeePerGas"] = max_priority_fee
        else:
            tx.pop("maxFeePerGas", None)
            tx.pop("maxPriorityFeePerGas", None)
            tx["gasPrice"] = int(gas_price_legacy * gwei_multiplier)

        if not tx.get("gas"):
            tx["gas"] = self.w3.eth.estimate_gas(tx)

        return tx

    def sign_tx(self, tx: dict):
        return self.w3.eth.account.sign_transaction(tx, private_key=self.account.key)

    def execute(self, safe_tx: dict, signature: bytes) -> str:
        args = [value for key, value in safe_tx.items() if key != "nonce"]
        tx = self.safe.functions.execTransaction(*args, signature).build_transaction(
            self.get_tx_data()
        )
        tx["gas"] = int(tx["gas"] * 1.2)

        return self.send_tx(tx, tx_label=f"{self.label} execTransaction")

    def send_tx(
        self,
        tx: dict,
        tx_label: str = "",
        gwei_multiplier: float = settings.GWEI_MULTIPLIER,
        gwei_increment: float = 0.5,
        max_retry: int = settings.MAX_RETRY,
        delay: float = settings.RETRY_DELAY,
    ) -> str:
        tx_hash = None

        for attempt in range(1, max_retry + 1):
            try:
                tx = self.get_gas(tx, gwei_multiplier)

                signed_tx = self.sign_tx(tx)
                tx_hash = self.w3.to_hex(self.w3.eth.send_raw_transaction(signed_tx.raw_transaction))
                logger.info(f"{tx_label} | {self.chain.explorer}/tx/{tx_hash}")

                tx_receipt = self.w3.eth.wait_for_transaction_receipt(
                    tx_hash, timeout=settings.RECEIPT_TIMEOUT
                )

                if tx_receipt.status == 1:
                    logger.success(f"{tx_label} | Tx confirmed")
                    return tx_hash

                raise WalletError(f"Tx {tx_hash} reverted")

            except WalletError:
                raise

            except Exception as err:
                logger.debug(f"{tx_label} | Error on attempt {attempt}: {err}")
                error_str = str(err)

                if tx_hash and ("already known" in error_str or "nonce too low" in error_str):
                    logger.info(f"{tx_label} | Tx is likely confirmed")
                    return tx_hash

                if "insufficient funds" in error_str:
                    raise WalletError(f"Insufficient funds for gas on {self.address}") from err

                if attempt == max_retry:
                    raise WalletError(f"All {max_retry} attempts failed: {err}") from err

                if any(
                    error in error_str
                    for error in [
                        "replacement transaction underpriced",
                        "is not in the chain after",
                        "max fee per gas less than block base fee",
                        "fee cap less than block base fee",
                    ]
                ):
                    logger.warning(
                        f"{tx_label} | Underpriced or fee error, increasing gwei and retrying"
                    )

                time.sleep(delay)
                gwei_multiplier += gwei_increment

    def service_url(self, path: str) -> str:
        if not self.chain.tx_service_url:
            raise WalletError(f"No Safe Transaction Service for {self.chain.name}")
        return f"{self.chain.tx_service_url}/api/v1/{path}"

    def next_queued_nonce(self, nonce: int) -> int:
        """
        Skip nonces already taken by queued (not executed) proposals.
        """
        response = requests.get(
            self.service_url(f"safes/{self.safe_address}/multisig-transactions/"),
            params={"executed": "false", "nonce__gte": nonce, "ordering": "-nonce", "limit": 1},
            timeout=30,
        )
        response.raise_for_status()

        queued = response.json().get("results", [])
        if queued:
            return max(nonce, int(queued[0]["nonce"]) + 1)
        return nonce

    def propose(self, safe_tx: dict, safe_tx_hash: bytes, signature: bytes) -> str:
        safe_tx_hash = self.w3.to_hex(safe_tx_hash)
        payload = {
            **safe_tx,
            "value": str(safe_tx["value"]),
            "data": self.w3.to_hex(safe_tx["data"]),
            "safeTxGas": str(safe_tx["safeTxGas"]),
            "baseGas": str(safe_tx["baseGas"]),
            "gasPrice": str(safe_tx["gasPrice"]),
            "contractTransactionHash": safe_tx_hash,
            "sender": self.address,
            "signature": self.w3.to_hex(signature),
            "origin": "csv-airdrop",
        }

        try:
            response = requests.post(
                self.service_url(f"safes/{self.safe_address}/multisig-transactions/"),
                json=payload,
                timeout=30,
            )
            response.raise_for_status()
        except requests.RequestException as err:
            raise WalletError(f"Could not propose {safe_tx_hash}: {err}") from err

        self._proposed.add(safe_tx_hash)
        logger.info(f"{self.label} Proposed {safe_tx_hash}, waiting for the other owners")
        return safe_tx_hash

    def get_bundle_status(self, handle: str) -> SubmissionStatus:
        if handle in self._proposed:
            response = requests.get(self.service_url(f"multisig-transactions/{handle}/"), timeout=30)
            if response.status_code == 404:
                return SubmissionStatus(accepted=False)
            response.raise_for_status()

            return SubmissionStatus(accepted=True, tx_hash=response.json().get("transactionHash") or handle)

        receipt = self.w3.eth.get_transaction_receipt(handle)
        return SubmissionStatus(accepted=receipt.status == 1, tx_hash=handle)

    async def submit(self, txs: Sequence[Transaction]) -> str:
        return await asyncio.to_thread(self.submit_bundle, txs)

    async def get_status(self, handle: str) -> SubmissionStatus:
        return await asyncio.to_thread(self.get_bundle_status, handle)
