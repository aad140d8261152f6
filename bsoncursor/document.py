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
"""document.py.

The Document type, which owns the raw bytes that contexts navigate.
"""
import logging
# Local imports.
import bsoncursor.codec_util as util
import bsoncursor.errors as errors


logger = logging.getLogger(__name__)


class Document(object):
    """Immutable owner of a BSON byte buffer and its declared length.

    The buffer is copied into an immutable 'bytes' object on construction, so
    later changes to the caller's buffer (i.e. a reused 'bytearray') are not
    visible to any Context. If 'size' is omitted, the length of the buffer is
    used as the declared length.

    Documents can be used as a context manager, in which case the document
    is finalized on exit:

        with Document(data) as doc:
            ctx = bsoncursor.init(doc)
            ...
    """

    def __init__(self, data, size=None):
        if data is None:
            raise errors.InvalidInput('No buffer given for the document.')
        self._data = bytes(data)
        if size is None:
            size = len(self._data)
        self._size = int(size)

    @property
    def data(self):
        """Return the raw bytes, or None once finalized."""
        return self._data

    @property
    def size(self):
        """Return the declared length (0 once finalized)."""
        return self._size

    @property
    def finalized(self):
        return self._data is None

    def __len__(self):
        return self._size

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finalize()

    def __repr__(self):
        if self.finalized:
            return '<Document (finalized)>'
        return '<Document size={}>'.format(self._size)

    def validate(self):
        """Check the outer length prefix and terminator of this document.

        The little-endian int32 at offset 0 must equal the declared length,
        and the byte at 'size - 1' must be the 0x00 terminator.
        """
        if self.finalized:
            raise errors.InvalidInput('Document was already finalized.')
        if self._size < util.MIN_DOCUMENT_SIZE or \
                self._size > len(self._data):
            raise errors.CorruptedDocument(
                'Declared length {} does not fit a buffer of {} '
                'bytes'.format(self._size, len(self._data)))

        length = util.unpack_from(
            util.INT32_STRUCT, self._data, 0, self._size)
        if length != self._size:
            raise errors.CorruptedDocument(
                'Length prefix {} does not match the declared length '
                '{}'.format(length, self._size), fpos=0)
        if self._data[self._size - 1] != 0x00:
            raise errors.CorruptedDocument(
                'Missing document terminator', fpos=self._size - 1)

    def finalize(self):
        """Release the buffer and reset the recorded length to zero.

        Calling this on an already finalized document does nothing.
        """
        if self.finalized:
            return
        logger.debug('Finalizing document of %d bytes', self._size)
        self._data = None
        self._size = 0
