import numpy
import pytest

import simulator


@pytest.fixture
def server():
    """ Start :class:`simulator.Server` instances on demand, stopping them
        when the test completes.
    """

    servers = list()

    def start(replies, hold=False):
        server = simulator.Server(replies, hold)
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.stop()


@pytest.fixture
def camera_reply():
    """ A reply from a single camera source: a record pair followed by the
        image as an array pair.
    """

    metadata = dict()
    metadata['source'] = 'camera:output'
    metadata['timestamp.tid'] = 10000000001

    data = dict()
    data['data.image.bitsPerPixel'] = 32
    data['data.image.dimensions'] = [4, 2]
    data['data.image.encoding'] = 'GRAY'

    image = numpy.arange(8, dtype='uint32').reshape((4, 2))

    frames = simulator.record_pair('camera:output', data, metadata)
    frames += simulator.array_pair('camera:output', 'data.image.data', image, content='ImageData')

    return frames


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
