"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`kbclient.protocol` so the protocol remains
transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """No reply arrived within the requested timeout."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class Transport(ABC):
    """Minimal contract for a request/reply transport.

    Implementations move opaque frames; they do not interpret them.
    """

    @abstractmethod
    def connect(self, endpoint: str) -> None:
        """Establish the underlying connection/socket."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket.

        A receive blocked in another thread must be interrupted with
        :class:`TransportConnectionError`.
        """

    @abstractmethod
    def send(self, data: bytes) -> None:
        """Send a single-frame request."""

    @abstractmethod
    def recv(self, timeout: Optional[float] = None) -> List:
        """Receive every frame of the next reply.

        Raises :class:`TransportTimeout` if no reply arrives within
        *timeout* seconds; None waits indefinitely. The returned frames
        expose the buffer protocol.
        """

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False
