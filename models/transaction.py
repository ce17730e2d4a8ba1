from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Transaction:
    """
    Wallet-agnostic call descriptor handed to the wallet host.
    """

    to: str
    value: int = 0
    data: bytes = b""

    def to_dict(self) -> dict:
        return {
            "to": self.to,
            "value": str(self.value),
            "data": "0x" + self.data.hex() if self.data else "0x",
        }


@dataclass(frozen=True)
class SubmissionStatus:
    accepted: bool
    tx_hash: Optional[str] = None
