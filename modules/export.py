import json
import time
from datetime import datetime
from pathlib import Path
from typing import Sequence

from models.network import Network
from models.transaction import SubmissionStatus, Transaction
from modules.logger import logger


class BatchFileHost:
    """
    Writes each bundle as a Safe Transaction Builder JSON file instead of sending it.

    The files can be dropped into the Transaction Builder app of the Safe UI.
    """

    def __init__(
        self, out_dir: str | Path, chain: Network, safe_address: str = "", run_id: str | None = None
    ):
        self.out_dir = Path(out_dir)
        self.chain = chain
        self.safe_address = safe_address
        # files of separate runs never share a name
        self.run_id = run_id or datetime.now().strftime("%Y%m%d-%H%M%S")
        self._written = 0

    def build_batch(self, txs: Sequence[Transaction], name: str) -> dict:
        return {
            "version": "1.0",
            "chainId": str(self.chain.chain_id),
            "createdAt": int(time.time() * 1000),
            "meta": {
                "name": name,
                "description": f"{len(txs)} transfers",
                "createdFromSafeAddress": self.safe_address,
            },
            "transactions": [tx.to_dict() for tx in txs],
        }

    async def submit(self, txs: Sequence[Transaction]) -> str:
        self._written += 1
        name = f"airdrop-{self.run_id}-batch-{self._written}"
        path = self.out_dir / f"{name}.json"

        self.out_dir.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as file:
            json.dump(self.build_batch(txs, name), file, indent=2)

        logger.info(f"Batch of {len(txs)} transactions written to {path}")
        return str(path)

    async def get_status(self, handle: str) -> SubmissionStatus:
        return SubmissionStatus(accepted=Path(handle).is_file())
