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
"""errors.py.

Exceptions for the bsoncursor module.
"""


class BSONError(Exception):
    """General exception for BSON navigation errors."""


class InvalidInput(BSONError):
    """Exception raised when a required argument is missing."""


class CorruptedDocument(BSONError):
    """Exception raised when the bytes do not describe a valid document.

    This covers length-prefix and terminator mismatches, as well as any read
    that would run past the bounds of the current scope.
    """

    def __init__(self, msg, *args, fpos=None):
        super(CorruptedDocument, self).__init__(msg, *args)
        self._fpos = fpos

    @property
    def fpos(self):
        """Byte offset in the document where the problem was detected."""
        return self._fpos

    def __str__(self):
        msg = super(CorruptedDocument, self).__str__()
        if self._fpos is None:
            return msg
        return u'{} (at offset {})'.format(msg, self._fpos)


class InvalidElementType(CorruptedDocument):
    """Exception denoting an unsupported BSON element type tag."""

    def __init__(self, tag, fpos=None):
        msg = "Invalid element type encountered: 0x{:02X}".format(tag)
        super(InvalidElementType, self).__init__(msg, fpos=fpos)
        self.tag = tag


class PositionOutOfRange(BSONError):
    """Exception raised when no matching element exists in the scope."""

    def __init__(self, key, msg=None):
        if msg is None:
            msg = 'No matching element in the current scope.'
        super(PositionOutOfRange, self).__init__(msg)
        self._key = key

    @property
    def key(self):
        """Key this error pertains to (could be the empty string)."""
        return self._key

    def __str__(self):
        msg = super(PositionOutOfRange, self).__str__()
        return u'Fetch key: {} -- {}'.format(self.key, msg)


class OutOfMemory(BSONError):
    """Exception raised when a payload could not be copied out."""


class BadContext(BSONError):
    """Exception raised when a Context does not point into its document."""


class DocumentNotFound(BSONError):
    """Exception raised when finalizing a missing document."""
