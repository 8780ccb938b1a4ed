"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# The single outbound message; the server answers each one with exactly
# one multipart reply.
REQUEST = b"next"

# Header keys
SOURCE = "source"
CONTENT = "content"
METADATA = "metadata"
PATH = "path"
SHAPE = "shape"
DTYPE = "dtype"

# Content kinds. A "record" pair is announced on the wire as "msgpack".
RECORD = "msgpack"
ARRAY = "array"
IMAGE = "ImageData"

ARRAY_KINDS = (ARRAY, IMAGE)
