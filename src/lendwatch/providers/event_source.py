"""Event source protocol."""

from typing import Optional, Protocol

from lendwatch.domain.models import LedgerEvent, SupportedChain


class EventSource(Protocol):
    """
    Protocol for vault ledger event sources.

    Implementations return every deposit/withdraw of `user` on `vault` with
    since_ordinal <= ordinal <= until_ordinal, exhausting any pagination
    themselves. Failures are raised as UpstreamFetchError.
    """

    # Whether since_ordinal may be a watermark rather than the vault inception
    supports_resume: bool

    def latest_ordinal(self, chain: SupportedChain) -> int:
        """Return the chain head, used to bound every scan of one cycle."""
        ...

    def events_for(
        self,
        chain: SupportedChain,
        vault: str,
        user: str,
        since_ordinal: Optional[int] = None,
        until_ordinal: Optional[int] = None,
    ) -> list[LedgerEvent]:
        """
        Fetch events for a (user, vault) pair.

        since_ordinal=None scans from the vault's deployment block and
        until_ordinal=None up to the current head.
        """
        ...
