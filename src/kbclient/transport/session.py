"""Transport-agnostic session layer.

The :class:`Client` is the principal entry point: it requests the next
reply from a bridge server and decodes it into :class:`SourceRecord`
instances, one per source.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..protocol import fields, frames, trace
from ..protocol.record import SourceRecord
from .base import Transport, TransportTimeout
from .zmq.request import Transport as ZmqTransport

logger = logging.getLogger(__name__)


IDLE = "idle"
AWAITING_REPLY = "awaiting reply"


class Client:
    """Client-side request/reply pattern logic for a bridge server.

    At most one request is ever outstanding. A request is sent only when the
    client is :data:`IDLE`; a call that times out leaves the client
    :data:`AWAITING_REPLY`, and the following call resumes waiting for the
    reply to the original request rather than sending another one.

    A :class:`Client` is not thread-safe; use one per thread.

    :param endpoint: Server address, such as ``tcp://localhost:4545``.
    :param timeout: Seconds to wait for a reply; None waits indefinitely.
    :param transport: A :class:`Transport`; defaults to a ZeroMQ REQ socket.
    """

    timeout: Optional[float] = None
    request = fields.REQUEST

    def __init__(self, endpoint: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[Transport] = None):
        if timeout is not None:
            if timeout < 0:
                timeout = None
            self.timeout = timeout

        if transport is None:
            transport = ZmqTransport()

        self.transport = transport
        self.state = IDLE

        if endpoint is not None:
            self.connect(endpoint)

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def awaiting_reply(self) -> bool:
        return self.state == AWAITING_REPLY

    def connect(self, endpoint: str) -> None:
        self.transport.connect(endpoint)

    def close(self) -> None:
        self.transport.close()

    def next(self) -> Dict[str, SourceRecord]:
        """Request and decode the next reply.

        Returns a dictionary of :class:`SourceRecord` instances keyed by
        source. The dictionary is empty if the server did not reply within
        the timeout. A malformed reply raises
        :class:`kbclient.protocol.ProtocolError`.
        """

        parts = self._exchange()
        if parts is None:
            return dict()

        return frames.decode(parts)

    def show_msg(self) -> Optional[str]:
        """Request the next reply and return its raw structure as text.

        The reply is consumed. Returns None on timeout.
        """

        parts = self._exchange()
        if parts is None:
            return None

        return trace.render_multipart(parts)

    def show_next(self) -> str:
        """Request the next reply and describe each decoded record.

        The reply is consumed.
        """

        return trace.summarize(self.next())

    # --- internal ---
    def _exchange(self) -> Optional[List]:
        """Send a request if none is outstanding, then wait for the reply."""

        if self.state == IDLE:
            self.transport.send(self.request)
            self.state = AWAITING_REPLY
            logger.debug("request sent")

        try:
            parts = self.transport.recv(self.timeout)
        except TransportTimeout:
            logger.debug("no reply within %s sec, request remains outstanding", self.timeout)
            return None

        self.state = IDLE
        logger.debug("received reply of %d frames", len(parts))
        return parts
