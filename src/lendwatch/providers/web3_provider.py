"""ERC-4626 vault reads over JSON-RPC with web3.py.

Events are read with eth_getLogs filtered on the indexed `owner` topic, and
valuations with balanceOf followed by previewRedeem.
"""

import logging
from decimal import Decimal
from typing import Any, Optional

from web3 import Web3

from lendwatch.config.settings import Settings
from lendwatch.core.exceptions import UpstreamFetchError
from lendwatch.domain.models import EventKind, LedgerEvent, SupportedChain
from lendwatch.domain.registry import vault_start_block

logger = logging.getLogger(__name__)

VAULT_ABI: list[dict[str, Any]] = [
    {
        "name": "Deposit",
        "inputs": [
            {"name": "sender", "type": "address", "indexed": True},
            {"name": "owner", "type": "address", "indexed": True},
            {"name": "assets", "type": "uint256", "indexed": False},
            {"name": "shares", "type": "uint256", "indexed": False},
        ],
        "anonymous": False,
        "type": "event",
    },
    {
        "name": "Withdraw",
        "inputs": [
            {"name": "sender", "type": "address", "indexed": True},
            {"name": "receiver", "type": "address", "indexed": True},
            {"name": "owner", "type": "address", "indexed": True},
            {"name": "assets", "type": "uint256", "indexed": False},
            {"name": "shares", "type": "uint256", "indexed": False},
        ],
        "anonymous": False,
        "type": "event",
    },
    {
        "stateMutability": "view",
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "arg0", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "stateMutability": "view",
        "type": "function",
        "name": "previewRedeem",
        "inputs": [{"name": "shares", "type": "uint256"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]

# Event signature and the topic position of the indexed `owner` argument
_EVENT_SIGNATURES: dict[EventKind, tuple[str, int]] = {
    EventKind.DEPOSIT: ("Deposit(address,address,uint256,uint256)", 2),
    EventKind.WITHDRAW: ("Withdraw(address,address,address,uint256,uint256)", 3),
}

def to_asset_units(raw_amount: int) -> Decimal:
    """Convert an 18-decimal fixed-point integer to asset units."""
    # from_wei returns int 0 for zero amounts
    return Decimal(Web3.from_wei(raw_amount, "ether"))


def address_topic(address: str) -> str:
    """Left-pad an address to a 32-byte log topic."""
    return "0x" + "0" * 24 + address[2:].lower()


class Web3Clients:
    """Lazily built Web3 client per chain, shared by the sources of one request."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._clients: dict[SupportedChain, Web3] = {}

    def get(self, chain: SupportedChain) -> Web3:
        """Return the Web3 client of a chain."""
        if chain not in self._clients:
            provider = Web3.HTTPProvider(
                self._settings.get_rpc_url(chain.value),
                request_kwargs={"timeout": self._settings.http_timeout_seconds},
            )
            self._clients[chain] = Web3(provider)
        return self._clients[chain]


class Web3EventSource:
    """
    Event source reading Deposit/Withdraw logs from the chain.

    With `max_block_range` set, the scan is split into consecutive windows of
    at most that many blocks, for RPC endpoints that cap eth_getLogs ranges.
    """

    supports_resume = True

    def __init__(self, clients: Web3Clients, max_block_range: Optional[int] = None):
        self._clients = clients
        self._max_block_range = max_block_range

    def latest_ordinal(self, chain: SupportedChain) -> int:
        """Return the current block number of a chain."""
        try:
            return int(self._clients.get(chain).eth.block_number)
        except Exception as exc:
            raise UpstreamFetchError("Event source", f"{chain.value}: {exc}") from exc

    def events_for(
        self,
        chain: SupportedChain,
        vault: str,
        user: str,
        since_ordinal: Optional[int] = None,
        until_ordinal: Optional[int] = None,
    ) -> list[LedgerEvent]:
        """Fetch every deposit and withdraw of `user` on `vault` in a block range."""
        w3 = self._clients.get(chain)
        from_block = since_ordinal if since_ordinal is not None else vault_start_block(chain, vault)
        vault_address = Web3.to_checksum_address(vault)

        try:
            contract = w3.eth.contract(address=vault_address, abi=VAULT_ABI)
            latest_block = until_ordinal if until_ordinal is not None else w3.eth.block_number
            events: list[LedgerEvent] = []
            for kind, (signature, owner_position) in _EVENT_SIGNATURES.items():
                topics: list[Optional[str]] = [None] * (owner_position + 1)
                topics[0] = Web3.keccak(text=signature).to_0x_hex()
                topics[owner_position] = address_topic(user)
                event_abi = getattr(contract.events, signature.split("(")[0])()
                for log in self._get_logs(w3, vault_address, topics, from_block, latest_block):
                    decoded = event_abi.process_log(log)
                    events.append(
                        LedgerEvent(
                            kind=kind,
                            amount=to_asset_units(decoded["args"]["assets"]),
                            transaction_hash=decoded["transactionHash"].to_0x_hex(),
                            ordinal=int(decoded["blockNumber"]),
                            chain=chain.value,
                        )
                    )
        except Exception as exc:
            raise UpstreamFetchError("Event source", f"{chain.value}/{vault}: {exc}") from exc

        logger.debug("Read %d events for %s on %s/%s from block %d", len(events), user, chain.value, vault, from_block)
        return events

    def _get_logs(
        self,
        w3: Web3,
        vault_address: str,
        topics: list[Optional[str]],
        from_block: int,
        latest_block: int,
    ) -> list[Any]:
        if from_block > latest_block:
            return []
        step = self._max_block_range or (latest_block - from_block + 1)
        logs: list[Any] = []
        start = from_block
        while start <= latest_block:
            end = min(start + step - 1, latest_block)
            logs.extend(
                w3.eth.get_logs(
                    {
                        "address": vault_address,
                        "fromBlock": start,
                        "toBlock": end,
                        "topics": topics,
                    }
                )
            )
            start = end + 1
        return logs


class Web3ValuationSource:
    """Valuation source reading balanceOf then previewRedeem on the vault."""

    def __init__(self, clients: Web3Clients):
        self._clients = clients

    def redeemable_value(self, chain: SupportedChain, vault: str, user: str) -> Decimal:
        """Return the underlying value of the user's share balance."""
        w3 = self._clients.get(chain)
        try:
            contract = w3.eth.contract(address=Web3.to_checksum_address(vault), abi=VAULT_ABI)
            shares = contract.functions.balanceOf(Web3.to_checksum_address(user)).call()
            if shares == 0:
                return Decimal("0")
            redeemable = contract.functions.previewRedeem(shares).call()
        except Exception as exc:
            raise UpstreamFetchError("Valuation source", f"{chain.value}/{vault}: {exc}") from exc
        return to_asset_units(redeemable)
