import pytest

from models.transfer import AssetTransfer, CollectibleTransfer
from modules.exceptions import InvalidAddressError, RowParseError, TokenInfoError
from modules.parser import normalize_row, parse_csv, parse_row, parse_rows

from conftest import ALICE, BOB, CAROL, DAI, NFT, USDC, erc20_row, native_row, nft_row

BAD_CHECKSUM = "0x5AAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


def test_parse_erc20_row(token_info):
    transfer, warning = parse_row(erc20_row(ALICE, "12.5", USDC), token_info)

    assert transfer == AssetTransfer("erc20", USDC, ALICE, 12_500_000)
    assert warning is None
    assert token_info.calls == [USDC]


def test_parse_native_row_ignores_token_address(token_info):
    row = native_row(BOB, "0.1")
    row["token_address"] = DAI
    transfer, _ = parse_row(row, token_info)

    assert transfer == AssetTransfer("native", None, BOB, 10**17)
    assert token_info.calls == []


def test_parse_erc721_row_amount_is_one(token_info):
    transfer, _ = parse_row(nft_row(CAROL, "42", amount="5"), token_info)
    assert transfer == CollectibleTransfer("erc721", NFT, CAROL, 42, 1)


def test_parse_erc1155_row(token_info):
    transfer, _ = parse_row(nft_row(CAROL, "0x10", "erc1155", amount="3"), token_info)
    assert transfer == CollectibleTransfer("erc1155", NFT, CAROL, 16, 3)

    transfer, _ = parse_row(nft_row(CAROL, "7", "erc1155"), token_info)
    assert transfer.amount == 1


def test_header_and_values_are_normalized(token_info):
    row = {" Token_Type ": " ERC20 ", "TOKEN_ADDRESS": USDC.lower(), "Receiver": f" {ALICE} ", "amount": "1", "note": "x"}
    transfer, _ = parse_row(row, token_info)

    assert transfer == AssetTransfer("erc20", USDC, ALICE, 10**6)


def test_id_column_alias():
    row = normalize_row({"token_type": "erc721", "id": "9"})
    assert row["token_id"] == "9"


@pytest.mark.parametrize("token_type", ["", "erc777", "nft", "eth"])
def test_unknown_token_type(token_type, token_info):
    row = erc20_row()
    row["token_type"] = token_type

    with pytest.raises(RowParseError, match="unknown token_type"):
        parse_row(row, token_info)


def test_invalid_address_names_the_field(token_info):
    with pytest.raises(InvalidAddressError) as exc_info:
        parse_row(erc20_row(receiver=BAD_CHECKSUM), token_info)
    assert exc_info.value.field == "receiver"

    with pytest.raises(InvalidAddressError) as exc_info:
        parse_row(erc20_row(token="0xnope"), token_info)
    assert exc_info.value.field == "token_address"


@pytest.mark.parametrize(
    "row, column",
    [
        ({"token_type": "erc20", "receiver": ALICE, "amount": "1"}, "token_address"),
        ({"token_type": "native", "receiver": ALICE}, "amount"),
        ({"token_type": "native", "amount": "1"}, "receiver"),
        ({"token_type": "erc721", "token_address": NFT, "receiver": ALICE}, "token_id"),
        ({"token_type": "erc1155", "receiver": ALICE, "token_id": "1"}, "token_address"),
    ],
)
def test_missing_required_columns(row, column, token_info):
    with pytest.raises(RowParseError, match=f"missing '{column}'"):
        parse_row(row, token_info)


@pytest.mark.parametrize("amount", ["-1", "abc", "1e", "NaN"])
def test_invalid_amount(amount, token_info):
    with pytest.raises(RowParseError, match="invalid amount"):
        parse_row(native_row(amount=amount), token_info)


@pytest.mark.parametrize("token_id", ["-1", "abc", "1.5"])
def test_invalid_token_id(token_id, token_info):
    with pytest.raises(RowParseError):
        parse_row(nft_row(token_id=token_id), token_info)


def test_values_past_uint256_are_row_errors(token_info):
    too_big = str(2**256)
    result = parse_rows(
        [
            erc20_row(ALICE, too_big),
            native_row(BOB, too_big),
            nft_row(CAROL, too_big),
            nft_row(CAROL, "1", "erc1155", amount=too_big),
            nft_row(CAROL, hex(2**256)),
        ],
        token_info,
    )

    assert result.transfers == []
    assert [index for index, _ in result.errors] == [0, 1, 2, 3, 4]
    assert all("uint256" in err.message for _, err in result.errors)


def test_uint256_max_is_accepted(token_info):
    max_value = 2**256 - 1

    transfer, _ = parse_row(nft_row(CAROL, str(max_value), "erc1155", amount=str(max_value)), token_info)
    assert transfer.token_id == max_value
    assert transfer.amount == max_value

    transfer, _ = parse_row(erc20_row(ALICE, str(max_value // 10**6)), token_info)
    assert transfer.amount == max_value // 10**6 * 10**6


def test_unknown_token_decimals_is_a_row_error(token_info):
    with pytest.raises(TokenInfoError):
        parse_row(erc20_row(token=NFT), token_info)


def test_truncation_is_reported(token_info):
    transfer, warning = parse_row(erc20_row(amount="1.0000001", token=USDC), token_info)

    assert transfer.amount == 1_000_000
    assert warning is not None
    assert warning.decimals == 6


def test_parse_rows_collects_errors_and_keeps_order(token_info):
    rows = [
        erc20_row(ALICE, "1"),
        erc20_row(BAD_CHECKSUM, "1"),
        native_row(BOB, "2"),
        {"token_type": "bogus"},
        erc20_row(CAROL, "0.00000001", DAI),
        erc20_row(CAROL, "0.0000001", USDC),
    ]

    result = parse_rows(rows, token_info)

    assert [t.receiver for t in result.transfers] == [ALICE, BOB, CAROL, CAROL]
    assert [index for index, _ in result.errors] == [1, 3]
    assert isinstance(result.errors[0][1], InvalidAddressError)
    assert result.errors[0][1].row_index == 1
    assert str(result.errors[1][1]).startswith("Row 4:")
    assert [index for index, _ in result.warnings] == [5]
    assert result.transfers[-1].amount == 0


def test_bad_checksum_never_becomes_a_transfer(token_info):
    result = parse_rows([erc20_row(BAD_CHECKSUM), native_row(BAD_CHECKSUM)], token_info)

    assert result.transfers == []
    assert len(result.errors) == 2


def test_strict_checksum(token_info):
    result = parse_rows([native_row(ALICE.lower())], token_info, strict=True)
    assert len(result.errors) == 1

    result = parse_rows([native_row(ALICE.lower())], token_info, strict=False)
    assert result.transfers[0].receiver == ALICE


def test_asset_and_collectible_views(token_info):
    result = parse_rows([nft_row(), erc20_row(), native_row(), nft_row(token_type="erc1155")], token_info)

    assert [t.token_type for t in result.asset_transfers] == ["erc20", "native"]
    assert [t.token_type for t in result.collectible_transfers] == ["erc721", "erc1155"]


def test_parse_csv(tmp_path, token_info):
    path = tmp_path / "transfers.csv"
    path.write_text(
        "\ufefftoken_type,token_address,receiver,amount,id,comment\n"
        f"erc20,{USDC},{ALICE},1.5,,first\n"
        f"native,,{BOB},0.5,,\n"
        f"erc721,{NFT},{CAROL},,7\n",
        encoding="utf-8",
    )

    result = parse_csv(path, token_info)

    assert result.errors == []
    assert result.transfers == [
        AssetTransfer("erc20", USDC, ALICE, 1_500_000),
        AssetTransfer("native", None, BOB, 5 * 10**17),
        CollectibleTransfer("erc721", NFT, CAROL, 7, 1),
    ]
