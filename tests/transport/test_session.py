import pytest

import kbclient
from kbclient.transport import session

import simulator


def test_next(camera_reply):

    transport = simulator.FakeTransport([camera_reply])
    client = kbclient.Client('tcp://localhost:4545', transport=transport)

    assert transport.endpoint == 'tcp://localhost:4545'
    assert client.state == session.IDLE

    records = client.next()

    assert list(records) == ['camera:output']
    assert transport.sent == [b'next']
    assert transport.timeouts == [None]
    assert client.state == session.IDLE
    assert client.awaiting_reply == False


def test_timeout_does_not_resend(camera_reply):

    transport = simulator.FakeTransport([None, None, camera_reply, camera_reply])
    client = kbclient.Client(timeout=0.1, transport=transport)

    assert client.next() == {}
    assert client.state == session.AWAITING_REPLY
    assert client.awaiting_reply == True
    assert transport.sent == [b'next']

    assert client.next() == {}
    assert transport.sent == [b'next']

    records = client.next()
    assert list(records) == ['camera:output']
    assert transport.sent == [b'next']
    assert client.state == session.IDLE

    client.next()
    assert transport.sent == [b'next', b'next']
    assert transport.timeouts == [0.1, 0.1, 0.1, 0.1]


def test_negative_timeout_blocks():

    transport = simulator.FakeTransport([[]])
    client = kbclient.Client(timeout=-1, transport=transport)

    assert client.timeout is None
    assert client.next() == {}
    assert transport.timeouts == [None]


def test_empty_reply():

    transport = simulator.FakeTransport([[]])
    client = kbclient.Client(transport=transport)

    assert client.next() == {}
    assert client.state == session.IDLE


def test_protocol_error_consumes_reply(camera_reply):

    missing_content = [simulator.pack({'source': 'cam', 'metadata': {}}), simulator.pack({})]
    broken = simulator.record_pair('cam', {}) + missing_content

    transport = simulator.FakeTransport([broken, camera_reply])
    client = kbclient.Client(transport=transport)

    with pytest.raises(kbclient.ProtocolError):
        client.next()

    assert client.state == session.IDLE

    records = client.next()
    assert list(records) == ['camera:output']
    assert transport.sent == [b'next', b'next']


def test_odd_reply_yields_nothing():

    transport = simulator.FakeTransport([simulator.record_pair('cam', {}) + [b'extra']])
    client = kbclient.Client(transport=transport)

    with pytest.raises(kbclient.ProtocolError, match='odd frame count'):
        client.next()


def test_show_msg(camera_reply):

    transport = simulator.FakeTransport([None, camera_reply])
    client = kbclient.Client(timeout=0.1, transport=transport)

    assert client.show_msg() is None
    assert client.awaiting_reply

    rendered = client.show_msg()
    assert rendered.count('----------new message----------') == 4
    assert '(32 bytes)' in rendered
    assert transport.sent == [b'next']
    assert client.state == session.IDLE


def test_show_next(camera_reply):

    transport = simulator.FakeTransport([camera_reply])
    client = kbclient.Client(transport=transport)

    summary = client.show_next()
    assert 'source: camera:output' in summary
    assert 'data.image.data, array-like, [4, 2], uint32' in summary


def test_context_manager():

    transport = simulator.FakeTransport()

    with kbclient.Client(transport=transport) as client:
        assert client.transport is transport

    assert transport.closed


def test_request_token():

    class Custom(kbclient.Client):
        request = b'more'

    transport = simulator.FakeTransport([[]])
    Custom(transport=transport).next()

    assert transport.sent == [b'more']


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
