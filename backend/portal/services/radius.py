"""
RADIUS Authenticator

Thin async wrapper around the pyrad client. The portal never speaks the RADIUS
wire protocol itself: pyrad builds, encrypts and sends the Access-Request.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from pyrad import packet
from pyrad.client import Client, Timeout
from pyrad.dictionary import Dictionary

from ..config import settings

logger = logging.getLogger(__name__)

DEFAULT_DICTIONARY = Path(__file__).resolve().parent / "data" / "radius.dictionary"


@dataclass
class RadiusResult:
    """Outcome of one Access-Request"""
    success: bool
    message: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


def _plain(value: Any) -> Any:
    """Make a decoded attribute value JSON friendly"""
    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, (int, str)):
        return value
    return str(value)


class RadiusClient:
    """RADIUS PAP authentication against a single server"""

    def __init__(
        self,
        host: str,
        port: int = 1812,
        secret: str = "testing123",
        timeout: float = 5.0,
        nas_identifier: Optional[str] = None,
        dictionary_path: Path = DEFAULT_DICTIONARY,
    ):
        self.host = host
        self.port = port
        self.secret = secret.encode("utf-8")
        self.timeout = timeout
        self.nas_identifier = nas_identifier
        self.dictionary = Dictionary(str(dictionary_path))

    def _build_client(self) -> Client:
        srv = Client(
            server=self.host,
            authport=self.port,
            secret=self.secret,
            dict=self.dictionary,
        )
        srv.timeout = self.timeout
        srv.retries = 1  # single attempt, a timeout is a hard failure
        return srv

    def _send(self, username: str, password: str) -> RadiusResult:
        """Blocking Access-Request round-trip (runs in a worker thread)"""
        srv = self._build_client()
        req = srv.CreateAuthPacket(code=packet.AccessRequest, User_Name=username)
        req["User-Password"] = req.PwCrypt(password)
        if self.nas_identifier:
            req["NAS-Identifier"] = self.nas_identifier

        reply = srv.SendPacket(req)
        try:
            attributes = {key: [_plain(v) for v in reply[key]] for key in reply.keys()}
        except (UnicodeDecodeError, KeyError, ValueError) as e:
            # The reply code alone decides the outcome; unreadable attributes are dropped
            logger.warning("[RADIUS] could not decode reply attributes: %s", e)
            attributes = {}

        if reply.code == packet.AccessAccept:
            return RadiusResult(True, "RADIUS authentication successful", attributes)
        return RadiusResult(False, "RADIUS authentication rejected", attributes, error="access-reject")

    async def authenticate(self, username: str, password: str) -> RadiusResult:
        """
        Authenticate a credential pair against the RADIUS server.

        Returns a failed RadiusResult on Access-Reject, timeout or network
        error instead of raising. Never retried.
        """
        try:
            # The outer bound guards against a wedged socket outliving pyrad's own timeout
            result = await asyncio.wait_for(
                asyncio.to_thread(self._send, username, password),
                timeout=self.timeout + 1,
            )
        except (Timeout, asyncio.TimeoutError):
            logger.warning("[RADIUS] %s:%s timed out after %.1fs", self.host, self.port, self.timeout)
            return RadiusResult(False, "RADIUS authentication failed", error="timeout")
        except (OSError, packet.PacketError) as e:
            logger.error("[RADIUS] request to %s:%s failed: %s", self.host, self.port, e)
            return RadiusResult(False, "RADIUS authentication failed", error=str(e))

        if not result.success:
            logger.info("[RADIUS] Access-Reject for %s", username)
        return result

    async def test_connection(self) -> bool:
        """Probe the server with a throwaway credential pair"""
        result = await self.authenticate("test", "test")
        logger.info("[RADIUS] connection test: %s", "SUCCESS" if result.success else "FAILED")
        return result.success


# Global singleton
radius_client = RadiusClient(
    host=settings.radius_host,
    port=settings.radius_port,
    secret=settings.radius_secret,
    timeout=settings.radius_timeout,
    nas_identifier=settings.radius_nas_identifier,
)
