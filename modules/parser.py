"""
CSV rows -> validated transfers.

Rows are validated one by one: a bad row is recorded in `ParseResult.errors`
and the rest of the sheet is still processed. Amounts are converted to the
token's smallest unit, truncating digits past the token's precision; every
truncation is reported in `ParseResult.warnings`.
"""

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

import settings
from data.const import NATIVE_DECIMALS
from models.transfer import (
    COLLECTIBLE_TYPES,
    ERC20,
    ERC721,
    NATIVE,
    TOKEN_TYPES,
    AssetTransfer,
    CollectibleTransfer,
    Transfer,
    is_asset,
    is_collectible,
)
from modules.exceptions import (
    InvalidAddressError,
    PrecisionLossWarning,
    RowParseError,
)
from modules.logger import logger
from modules.units import MAX_UINT256, to_wei
from modules.utils import checksum_address

# Older sheets name the token id column "id"
COLUMN_ALIASES = {"id": "token_id"}


@dataclass
class ParseResult:
    transfers: list[Transfer] = field(default_factory=list)
    errors: list[tuple[int, RowParseError]] = field(default_factory=list)
    warnings: list[tuple[int, PrecisionLossWarning]] = field(default_factory=list)

    @property
    def asset_transfers(self) -> list[AssetTransfer]:
        return [t for t in self.transfers if is_asset(t)]

    @property
    def collectible_transfers(self) -> list[CollectibleTransfer]:
        return [t for t in self.transfers if is_collectible(t)]


def normalize_row(row: Mapping[str, str]) -> dict[str, str]:
    normalized = {}
    for key, value in row.items():
        if key is None:
            continue  # surplus cells of a row longer than the header

        key = key.strip().lower()
        key = COLUMN_ALIASES.get(key, key)
        value = (value or "").strip()

        if key not in normalized or not normalized[key]:
            normalized[key] = value

    return normalized


def _required(row: dict, column: str, token_type: str) -> str:
    value = row.get(column, "")
    if not value:
        raise RowParseError(f"missing '{column}' for {token_type} transfer")
    return value


def _address(row: dict, column: str, token_type: str, strict: bool) -> str:
    value = _required(row, column, token_type)
    address = checksum_address(value, strict=strict)
    if not address:
        raise InvalidAddressError(column, value)
    return address


def _amount(value: str, decimals: int) -> tuple[int, PrecisionLossWarning | None]:
    try:
        amount, truncated = to_wei(value, decimals)
    except ValueError as err:
        raise RowParseError(f"invalid amount {value!r}: {err}") from err
    if amount > MAX_UINT256:
        raise RowParseError(f"amount {value} does not fit in uint256")

    warning = PrecisionLossWarning(value, decimals) if truncated else None
    return amount, warning


def _token_id(value: str) -> int:
    try:
        token_id = int(value, 16) if value.lower().startswith("0x") else int(value)
    except ValueError:
        raise RowParseError(f"invalid token_id {value!r}") from None

    if token_id < 0:
        raise RowParseError(f"token_id cannot be negative: {value}")
    if token_id > MAX_UINT256:
        raise RowParseError(f"token_id {value} does not fit in uint256")
    return token_id


def parse_row(
    row: Mapping[str, str], token_info, strict: bool = False
) -> tuple[Transfer, PrecisionLossWarning | None]:
    """
    Validate a single row. Raises RowParseError (or a subclass) on invalid input.
    """
    row = normalize_row(row)
    token_type = row.get("token_type", "").lower()

    if token_type not in TOKEN_TYPES:
        raise RowParseError(
            f"unknown token_type {row.get('token_type', '')!r}, expected one of {', '.join(TOKEN_TYPES)}"
        )

    receiver = _address(row, "receiver", token_type, strict)

    if token_type in COLLECTIBLE_TYPES:
        token_address = _address(row, "token_address", token_type, strict)
        token_id = _token_id(_required(row, "token_id", token_type))

        warning = None
        if token_type == ERC721:
            amount = 1
        else:
            amount, warning = _amount(row.get("amount") or "1", 0)

        transfer = CollectibleTransfer(
            token_type=token_type,
            token_address=token_address,
            receiver=receiver,
            token_id=token_id,
            amount=amount,
        )
        return transfer, warning

    raw_amount = _required(row, "amount", token_type)

    if token_type == NATIVE:
        token_address = None
        decimals = NATIVE_DECIMALS
    else:
        token_address = _address(row, "token_address", token_type, strict)
        decimals = token_info.decimals(token_address)

    amount, warning = _amount(raw_amount, decimals)

    transfer = AssetTransfer(
        token_type=ERC20 if token_type == ERC20 else NATIVE,
        token_address=token_address,
        receiver=receiver,
        amount=amount,
    )
    return transfer, warning


def parse_rows(rows: Iterable[Mapping[str, str]], token_info, strict: bool = None) -> ParseResult:
    if strict is None:
        strict = settings.STRICT_CHECKSUM

    result = ParseResult()

    for index, row in enumerate(rows):
        try:
            transfer, warning = parse_row(row, token_info, strict=strict)
        except RowParseError as err:
            err.row_index = index
            result.errors.append((index, err))
            logger.warning(str(err))
            continue

        result.transfers.append(transfer)

        if warning:
            warning.row_index = index
            result.warnings.append((index, warning))
            logger.warning(f"Row {index + 1}: {warning}")

    logger.info(
        f"Parsed {len(result.transfers)} transfers, "
        f"{len(result.errors)} invalid rows, {len(result.warnings)} truncated amounts"
    )
    return result


def read_csv(path: str | Path) -> list[dict[str, str]]:
    # utf-8-sig strips the BOM spreadsheet apps put in front of the header
    with open(path, newline="", encoding="utf-8-sig") as file:
        return list(csv.DictReader(file))


def parse_csv(path: str | Path, token_info, strict: bool = None) -> ParseResult:
    return parse_rows(read_csv(path), token_info, strict=strict)
