"""
SNTP Client
===========

Thin adapter over the libraries that do the actual network work:

  - aiohttp's ThreadedResolver turns the pool hostname into one address
  - ntplib performs a single SNTP request/reply exchange

request_time() is blocking and is meant to run on an executor thread.
"""

import logging
import socket

import aiohttp
import ntplib

from .errors import ResolutionError
from .sntp_protocol import NTP_PORT, NTP_VERSION, Success, uptime_ms

logger = logging.getLogger(__name__)


class SntpClient:
    """Resolve NTP pool names and query single addresses.

    Args:
        version: NTP protocol version sent in each request.
    """

    def __init__(self, version: int = NTP_VERSION):
        self.version = version
        self._ntp = ntplib.NTPClient()

    async def query_host_address(self, host: str) -> str:
        """Resolve ``host`` to a single IPv4 address.

        Raises:
            ResolutionError: If the lookup fails or yields no address.
        """
        resolver = aiohttp.ThreadedResolver()
        # IDNA encoding rejects malformed labels with UnicodeError, not OSError
        try:
            hosts = await resolver.resolve(host, NTP_PORT, socket.AF_INET)
        except (OSError, UnicodeError) as e:
            raise ResolutionError(f"Unable to resolve {host}: {e}") from e
        finally:
            await resolver.close()

        if not hosts:
            raise ResolutionError(f"Unable to resolve {host}: no address")

        address = hosts[0]["host"]
        logger.debug(f"Resolved {host} -> {address}")
        return address

    def request_time(self, address: str, port: int, timeout_ms: int) -> Success:
        """Send one SNTP request to ``address`` and time the reply.

        Args:
            address:    Resolved server address.
            port:       Server UDP port.
            timeout_ms: Socket timeout for this request (ms).

        Returns:
            Success with the network time as of the returned uptime reference.

        Raises:
            ntplib.NTPException, OSError: On timeout or a bad reply.
        """
        response = self._ntp.request(
            address, version=self.version, port=port, timeout=timeout_ms / 1000.0
        )
        uptime_reference = uptime_ms()

        # dest_time is the local receive time; offset corrects it to server time
        ntp_time_ms = int((response.dest_time + response.offset) * 1000)
        round_trip_ms = max(0, int(round(response.delay * 1000)))

        return Success(
            ntp_time_ms=ntp_time_ms,
            uptime_reference_ms=uptime_reference,
            round_trip_time_ms=round_trip_ms,
        )
