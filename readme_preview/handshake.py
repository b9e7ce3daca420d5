"""WebSocket opening handshake helpers."""

import base64
import hashlib
from typing import List, Tuple

from . import config


def accept_token(nonce: str) -> str:
    """Turn a Sec-WebSocket-Key into its Sec-WebSocket-Accept value.

    Args:
        nonce: The client supplied key, used as-is

    Returns:
        Base64 encoded SHA-1 of the key and the protocol GUID
    """
    digest = hashlib.sha1((nonce + config.WEBSOCKET_MAGIC).encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


def handshake_headers(nonce: str) -> List[Tuple[str, str]]:
    """Headers for a 101 Switching Protocols response."""
    return [
        ("Upgrade", "websocket"),
        ("Connection", "Upgrade"),
        ("Sec-WebSocket-Protocol", config.SUBPROTOCOL),
        ("Sec-WebSocket-Accept", accept_token(nonce)),
    ]
