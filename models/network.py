from dataclasses import dataclass
from typing import Optional

# MultiSendCallOnly v1.3.0, same address on every chain with the canonical deployment
MULTISEND_CALL_ONLY = "0x40A2aCCbd92BCA938b02010E17A5b8929b49130D"


@dataclass
class Network:
    name: str
    chain_id: int
    rpc_url: str
    explorer: str
    eip_1559: bool
    native_token: str
    multisend_address: str = MULTISEND_CALL_ONLY
    tx_service_url: Optional[str] = None
