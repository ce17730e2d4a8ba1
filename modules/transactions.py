from typing import Iterable

from eth_abi import encode
from web3 import Web3

from models.transaction import Transaction
from models.transfer import ERC20, ERC721, NATIVE, AssetTransfer, CollectibleTransfer


def selector(signature: str) -> bytes:
    return bytes(Web3.keccak(text=signature)[:4])


ERC20_TRANSFER = selector("transfer(address,uint256)")
ERC721_SAFE_TRANSFER = selector("safeTransferFrom(address,address,uint256)")
ERC1155_SAFE_TRANSFER = selector("safeTransferFrom(address,address,uint256,uint256,bytes)")


def encode_call(fn_selector: bytes, types: list[str], args: list) -> bytes:
    return fn_selector + encode(types, args)


def build_asset_transfer(transfer: AssetTransfer) -> Transaction:
    if transfer.token_type == NATIVE:
        return Transaction(to=transfer.receiver, value=transfer.amount)

    if transfer.token_type == ERC20:
        data = encode_call(ERC20_TRANSFER, ["address", "uint256"], [transfer.receiver, transfer.amount])
        return Transaction(to=transfer.token_address, data=data)

    raise ValueError(f"{transfer.token_type} is not an asset transfer")


def build_collectible_transfer(transfer: CollectibleTransfer, sender: str) -> Transaction:
    if transfer.token_type == ERC721:
        data = encode_call(
            ERC721_SAFE_TRANSFER,
            ["address", "address", "uint256"],
            [sender, transfer.receiver, transfer.token_id],
        )
    else:
        data = encode_call(
            ERC1155_SAFE_TRANSFER,
            ["address", "address", "uint256", "uint256", "bytes"],
            [sender, transfer.receiver, transfer.token_id, transfer.amount, b""],
        )

    return Transaction(to=transfer.token_address, data=data)


def build_asset_transfers(chunk: Iterable[AssetTransfer]) -> list[Transaction]:
    return [build_asset_transfer(transfer) for transfer in chunk]


def build_collectible_transfers(
    collectibles: Iterable[CollectibleTransfer], sender: str
) -> list[Transaction]:
    """
    Collectibles are pulled from `sender`, the account submitting the bundle.
    """
    return [build_collectible_transfer(transfer, sender) for transfer in collectibles]
