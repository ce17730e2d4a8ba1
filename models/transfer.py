from dataclasses import dataclass
from typing import Literal, Optional, Union

ERC20 = "erc20"
NATIVE = "native"
ERC721 = "erc721"
ERC1155 = "erc1155"

ASSET_TYPES = (ERC20, NATIVE)
COLLECTIBLE_TYPES = (ERC721, ERC1155)
TOKEN_TYPES = ASSET_TYPES + COLLECTIBLE_TYPES


@dataclass(frozen=True)
class AssetTransfer:
    token_type: Literal["erc20", "native"]
    token_address: Optional[str]
    receiver: str
    amount: int  # smallest unit


@dataclass(frozen=True)
class CollectibleTransfer:
    token_type: Literal["erc721", "erc1155"]
    token_address: str
    receiver: str
    token_id: int
    amount: int = 1


Transfer = Union[AssetTransfer, CollectibleTransfer]


def is_asset(transfer: Transfer) -> bool:
    return transfer.token_type in ASSET_TYPES


def is_collectible(transfer: Transfer) -> bool:
    return transfer.token_type in COLLECTIBLE_TYPES
