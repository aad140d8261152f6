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
"""bsoncursor.

Read-only navigation over BSON documents held in memory.

Typical usage:

    ctx = bsoncursor.init(data)
    event = ctx.open('event')
    kind = event.extract_int32('type')
    message = event.extract_string('message')
"""
from bsoncursor.codec_util import ElementType
from bsoncursor.document import Document
from bsoncursor.cursor import (
    Context, init, open, fetch, check_context, finalize,
    extract_int32, extract_int64, extract_double, extract_boolean,
    extract_datetime, extract_string, extract_binary
)
from bsoncursor.errors import (
    BSONError, InvalidInput, CorruptedDocument, InvalidElementType,
    PositionOutOfRange, OutOfMemory, BadContext, DocumentNotFound
)


__all__ = [
    'ElementType', 'Document', 'Context',
    'init', 'open', 'fetch', 'check_context', 'finalize',
    'extract_int32', 'extract_int64', 'extract_double', 'extract_boolean',
    'extract_datetime', 'extract_string', 'extract_binary',
    'BSONError', 'InvalidInput', 'CorruptedDocument', 'InvalidElementType',
    'PositionOutOfRange', 'OutOfMemory', 'BadContext', 'DocumentNotFound',
]
