"""ZeroMQ request/reply transport.

A REQ socket enforces strict alternation: every send must be followed by a
complete receive before the next send. Timing out while waiting for a reply
leaves the socket waiting for that same reply; it is up to the caller to
retry the receive instead of sending again.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

import zmq

from ..base import Transport as BaseTransport
from ..base import TransportConnectionError, TransportTimeout

logger = logging.getLogger(__name__)


class Transport(BaseTransport):
    """Exchange frames with a bridge server via a ZeroMQ REQ socket.

    Each transport owns its own ZeroMQ context unless one is provided;
    closing a transport that owns its context interrupts a receive blocked
    in another thread.
    """

    linger = 0

    def __init__(self, context: Optional[zmq.Context] = None):
        self._own_context = context is None
        if context is None:
            context = zmq.Context()

        self.context = context
        self.socket: Optional[zmq.Socket] = None
        self.endpoint: Optional[str] = None
        self._receiving = False
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self.socket is not None

    def connect(self, endpoint: str) -> None:
        if self.socket is not None:
            raise TransportConnectionError(f"already connected to {self.endpoint}")

        socket = self.context.socket(zmq.REQ)
        socket.setsockopt(zmq.LINGER, self.linger)

        try:
            socket.connect(endpoint)
        except zmq.ZMQError as exc:
            socket.close()
            raise TransportConnectionError(f"cannot connect to {endpoint}: {exc}") from exc

        self.socket = socket
        self.endpoint = endpoint
        logger.info("connecting to server: %s", endpoint)

    def close(self) -> None:
        with self._lock:
            interrupt = self._receiving and self._own_context
            if interrupt:
                socket = None
            else:
                socket = self.socket
                self.socket = None

        if interrupt:
            # The receiving thread closes the socket once term() interrupts
            # its poll; term() returns after that.
            logger.debug("interrupting pending receive from %s", self.endpoint)
            self.context.term()
            return

        if socket is not None:
            socket.close(linger=self.linger)
            logger.debug("closed connection to %s", self.endpoint)

        if self._own_context and not self.context.closed:
            self.context.term()

    def send(self, data: bytes) -> None:
        socket = self._require()

        try:
            socket.send(data)
        except zmq.ZMQError as exc:
            raise TransportConnectionError(f"send to {self.endpoint} failed: {exc}") from exc

    def recv(self, timeout: Optional[float] = None) -> List[zmq.Frame]:
        with self._lock:
            socket = self._require()
            self._receiving = True

        if timeout is None or timeout < 0:
            milliseconds = None
        else:
            milliseconds = int(1000 * timeout)

        try:
            if socket.poll(milliseconds, zmq.POLLIN) == 0:
                raise TransportTimeout(f"no reply from {self.endpoint} in {timeout:.3f} sec")
            frames = socket.recv_multipart(copy=False)
        except zmq.ContextTerminated as exc:
            socket.close(linger=0)
            self.socket = None
            raise TransportConnectionError(f"connection to {self.endpoint} closed while waiting for a reply") from exc
        except zmq.ZMQError as exc:
            raise TransportConnectionError(f"receive from {self.endpoint} failed: {exc}") from exc
        finally:
            with self._lock:
                self._receiving = False

        return frames

    def _require(self) -> zmq.Socket:
        if self.socket is None:
            raise TransportConnectionError("not connected")
        return self.socket
