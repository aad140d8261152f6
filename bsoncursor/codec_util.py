# MIT License
#
# Copyright (c) 2022 Aaron Gibson
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
#
"""codec_util.py.

Common utilities for reading BSON elements out of a byte buffer.
"""
import enum
import struct
from collections import namedtuple
# Local imports.
import bsoncursor.errors as errors


# Define common structures for 'unpacking' bytes here.
BYTE_STRUCT = struct.Struct('B')
"""Struct to unpack a single byte."""


INT32_STRUCT = struct.Struct('<i')
"""Struct to unpack a 32-bit signed integer in little-endian format."""


INT64_STRUCT = struct.Struct('<q')
"""Struct to unpack a 64-bit signed integer in little-endian format."""


DOUBLE_STRUCT = struct.Struct('<d')
"""Struct to unpack a double (i.e. 64-bit float) in little-endian format."""


MIN_DOCUMENT_SIZE = 5
"""Smallest valid document: the 4-byte length plus the terminator."""


class ElementType(enum.IntEnum):
    """The BSON element types that can be navigated."""

    DOUBLE = 0x01
    STRING = 0x02
    DOCUMENT = 0x03
    ARRAY = 0x04
    BINARY = 0x05
    BOOLEAN = 0x08
    DATETIME = 0x09
    INT32 = 0x10
    INT64 = 0x12


ElementSize = namedtuple('ElementSize', ['fixed', 'prefixed'])
"""Rule for the payload size of an element.

'fixed' is the number of bytes the payload always takes. If 'prefixed' is
set, the payload starts with a 4-byte little-endian length that is added on
top of 'fixed'. Documents and arrays have 'fixed' set to 0 because their
length prefix already counts its own 4 bytes.
"""


ELEMENT_SIZES = {
    ElementType.DOUBLE: ElementSize(8, False),
    # <int32 length> <bytes> <\x00>; the length counts the terminator.
    ElementType.STRING: ElementSize(4, True),
    ElementType.DOCUMENT: ElementSize(0, True),
    ElementType.ARRAY: ElementSize(0, True),
    # <int32 length> <subtype byte> <bytes>
    ElementType.BINARY: ElementSize(5, True),
    ElementType.BOOLEAN: ElementSize(1, False),
    ElementType.DATETIME: ElementSize(8, False),
    ElementType.INT32: ElementSize(4, False),
    ElementType.INT64: ElementSize(8, False),
}


CONTAINER_TYPES = frozenset([ElementType.DOCUMENT, ElementType.ARRAY])
"""Element types that open a nested scope."""


def element_type(tag, fpos=None):
    """Return the ElementType for the given tag byte.

    Raises InvalidElementType for anything that is not supported, including
    the 0x00 terminator.
    """
    try:
        return ElementType(tag)
    except ValueError:
        raise errors.InvalidElementType(tag, fpos=fpos) from None


def element_size(tag, fpos=None):
    """Return the ElementSize rule for the given tag byte."""
    return ELEMENT_SIZES[element_type(tag, fpos=fpos)]


def unpack_from(fmt, data, offset, bound):
    """Unpack 'fmt' at 'offset', refusing to read at or past 'bound'."""
    if offset < 0 or offset + fmt.size > bound:
        raise errors.CorruptedDocument(
            'Truncated {}-byte value'.format(fmt.size), fpos=offset)
    try:
        return fmt.unpack_from(data, offset)[0]
    except struct.error as exc:
        raise errors.CorruptedDocument(str(exc), fpos=offset) from exc


def scan_name_length(data, position, bound):
    """Return the distance from the tag byte at 'position' to its name's NUL.

    The element name starts right after the tag byte, so the returned value
    is the name length plus one; the payload starts at 'position + result + 1'.
    The scan never looks at or past 'bound'.
    """
    index = data.find(b'\x00', position + 1, bound)
    if index < 0:
        raise errors.CorruptedDocument(
            'Unterminated element name', fpos=position)
    return index - position


def format_key(key):
    """Return the given key as raw bytes, or None for the 'no name' key."""
    if key is None:
        return None
    if isinstance(key, (bytes, bytearray, memoryview)):
        raw = bytes(key)
    else:
        # Cast non-string types (i.e. array indices) into a string.
        if not isinstance(key, str):
            key = str(key)
        raw = key.encode('utf-8')
    # The empty name means the same as no name at all.
    return raw or None
