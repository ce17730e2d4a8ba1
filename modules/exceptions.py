class AirdropError(Exception):
    """Base class for every error raised by the airdrop pipeline."""


class RowParseError(AirdropError):
    """
    A single CSV row could not be turned into a transfer.
    """

    def __init__(self, message: str, row_index: int = None):
        self.message = message
        self.row_index = row_index
        super().__init__(message)

    def __str__(self):
        if self.row_index is None:
            return self.message
        return f"Row {self.row_index + 1}: {self.message}"


class InvalidAddressError(RowParseError):
    def __init__(self, field: str, value: str, row_index: int = None):
        self.field = field
        self.value = value
        super().__init__(f"invalid address in '{field}': {value!r}", row_index)


class TokenInfoError(RowParseError):
    """Token metadata (decimals) could not be fetched."""


class PrecisionLossWarning(UserWarning):
    """
    Amount had more fractional digits than the token supports and was truncated.
    """

    def __init__(self, amount: str, decimals: int, row_index: int = None):
        self.amount = amount
        self.decimals = decimals
        self.row_index = row_index
        super().__init__(
            f"amount {amount} has more than {decimals} decimals, extra digits ignored"
        )


class ChunkConfigurationError(AirdropError, ValueError):
    pass


class SubmissionError(AirdropError):
    def __init__(self, index: int, message: str):
        self.index = index
        super().__init__(f"Chunk {index + 1}: {message}")


class DuplicateSubmissionError(AirdropError):
    def __init__(self, index: int, state):
        self.index = index
        self.state = state
        super().__init__(f"Chunk {index + 1} is already {state.value}")


class WalletError(AirdropError):
    """The wallet host could not dispatch or look up a bundle."""
