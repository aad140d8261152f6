# -*- coding: utf-8 -*-
#
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
"""builders.py.

Helpers to assemble raw BSON bytes by hand for the tests.

Most fixtures are produced with pymongo's ``bson.encode()``; these builders
cover what a regular encoder refuses to write, such as duplicate keys,
unsupported element types and corrupted length prefixes.
"""
import struct


def document(*elements):
    """Wrap the given raw elements into a document with a valid length."""
    body = b''.join(elements)
    return struct.pack('<i', len(body) + 5) + body + b'\x00'


def element(tag, name, payload):
    """Return a raw element: <tag> <name> \\x00 <payload>."""
    return bytes([tag]) + name.encode('utf-8') + b'\x00' + payload


def int32(name, value):
    return element(0x10, name, struct.pack('<i', value))


def int64(name, value):
    return element(0x12, name, struct.pack('<q', value))


def double(name, value):
    return element(0x01, name, struct.pack('<d', value))


def boolean(name, value):
    return element(0x08, name, b'\x01' if value else b'\x00')


def string(name, value):
    raw = value.encode('utf-8') + b'\x00'
    return element(0x02, name, struct.pack('<i', len(raw)) + raw)


def binary(name, value, subtype=0x00):
    return element(
        0x05, name, struct.pack('<i', len(value)) + bytes([subtype]) + value)


def subdocument(name, *elements):
    return element(0x03, name, document(*elements))


def array(name, *elements):
    return element(0x04, name, document(*elements))


def null(name):
    return element(0x0A, name, b'')


def with_length(doc, length):
    """Return 'doc' with its length prefix replaced by 'length'."""
    return struct.pack('<i', length) + doc[4:]
