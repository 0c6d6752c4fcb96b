import asyncio
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class PortScanner:
    """
    Single TCP connect probe. No retries: every call is one attempt.
    """

    def __init__(self, timeout: Optional[float] = None):
        # None waits for the network stack's own connect timeout
        self.timeout = timeout

    async def probe(self, address: str, port: int, timeout: Optional[float] = None) -> bool:
        """
        True iff the TCP handshake with address:port completes within the timeout.
        Refused, unreachable and timed out connections all count as closed.
        """
        timeout = self.timeout if timeout is None else timeout
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(address, port),
                timeout=timeout
            )
        except (asyncio.TimeoutError, OSError) as e:
            logger.debug("Probe %s:%d failed: %r", address, port, e)
            return False

        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return True
