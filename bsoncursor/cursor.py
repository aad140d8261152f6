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
"""cursor.py.

Navigation utilities for BSON documents held in memory.

This defines the ``Context`` class, a cursor that is bounded to a single
(sub-)document of a ``Document``. Rather than decoding the whole document
into python objects, a context walks the raw bytes: it can skip elements,
descend into nested documents and arrays, and read typed values out of the
element under the cursor. Nothing is copied except the values that are
actually extracted.

A context is made up of:
 - document: The Document whose bytes are read.
 - start_position: Offset of the first element of the current scope (just
   past the scope's 4-byte length prefix).
 - position: Offset of the element under the cursor (its type tag byte).
 - size: Length of the current scope, including its length prefix and its
   terminating 0x00 byte.

Contexts never refer back to the context they were opened from, so a child
context stays valid (and independent) after its parent moves on. A single
context is plain mutable state and must not be shared between threads
without external locking; separate contexts over the same document are
fine.

Element lookups are forward-only and never leave the current scope. The
typed extractors search for an element that matches both the requested name
AND the requested type; an element with the right name but the wrong type
is skipped, and the search carries on with the next element of that name.
"""
import datetime
import logging
from functools import partial

# Local imports.
import bsoncursor.codec_util as util
import bsoncursor.errors as errors
from bsoncursor.codec_util import ElementType
from bsoncursor.document import Document


logger = logging.getLogger(__name__)


_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


def _decode_name(data):
    """Decode an element name as UTF-8, falling back to the raw bytes."""
    if data is None:
        return None
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError:
        return data


def _copy_bytes(data, start, end):
    try:
        return data[start:end]
    except MemoryError as exc:
        raise errors.OutOfMemory(
            'Unable to allocate {} bytes'.format(end - start)) from exc


def _parse_64bit_float(data, offset, bound):
    value = util.unpack_from(util.DOUBLE_STRUCT, data, offset, bound)
    return value, offset + util.DOUBLE_STRUCT.size


def _parse_int32(data, offset, bound):
    value = util.unpack_from(util.INT32_STRUCT, data, offset, bound)
    return value, offset + util.INT32_STRUCT.size


def _parse_int64(data, offset, bound):
    value = util.unpack_from(util.INT64_STRUCT, data, offset, bound)
    return value, offset + util.INT64_STRUCT.size


def _parse_bool(data, offset, bound):
    value = util.unpack_from(util.BYTE_STRUCT, data, offset, bound)
    if value == 0x00:
        return False, offset + 1
    elif value == 0x01:
        return True, offset + 1
    raise errors.CorruptedDocument(
        'Invalid boolean value: {}'.format(value), fpos=offset)


def datetime_from_ms(utc_ms):
    """Convert milliseconds since the Unix epoch into a UTC datetime.

    Raises OverflowError if the value is outside of the datetime range.
    """
    return _EPOCH + datetime.timedelta(milliseconds=utc_ms)


def _parse_utc_datetime(data, offset, bound, as_datetime=False):
    utc_ms, offset = _parse_int64(data, offset, bound)
    if not as_datetime:
        return utc_ms, offset
    try:
        return datetime_from_ms(utc_ms), offset
    except OverflowError as exc:
        raise errors.CorruptedDocument(
            'Datetime out of range: {}'.format(utc_ms), fpos=offset) from exc


def _parse_utf8_string(data, offset, bound, decode=True):
    length = util.unpack_from(util.INT32_STRUCT, data, offset, bound)
    offset += util.INT32_STRUCT.size
    # The length counts the trailing null-terminator, so it is at least 1.
    if length < 1 or offset + length > bound:
        raise errors.CorruptedDocument(
            'Invalid string length: {}'.format(length), fpos=offset)
    end = offset + length - 1
    if data[end] != 0x00:
        raise errors.CorruptedDocument(
            'Last byte not the null-terminator!', fpos=end)

    raw = _copy_bytes(data, offset, end)
    if not decode:
        return raw, end + 1
    try:
        return raw.decode('utf-8'), end + 1
    except UnicodeDecodeError as exc:
        raise errors.CorruptedDocument(
            'Invalid UTF-8 string', fpos=offset) from exc


def _parse_binary(data, offset, bound):
    length = util.unpack_from(util.INT32_STRUCT, data, offset, bound)
    offset += util.INT32_STRUCT.size
    # Skip the subtype; only the raw bytes are returned.
    util.unpack_from(util.BYTE_STRUCT, data, offset, bound)
    offset += util.BYTE_STRUCT.size
    if length < 0 or offset + length > bound:
        raise errors.CorruptedDocument(
            'Invalid binary length: {}'.format(length), fpos=offset)
    return _copy_bytes(data, offset, offset + length), offset + length


class Context(object):
    """Cursor into one scope (document or array) of a Document.

    Contexts are normally created with ``init()`` (for the root scope) or
    ``Context.open()`` (for a nested scope) rather than directly.
    """

    def __init__(self, document, start_position, position, size):
        self.document = document
        self.start_position = start_position
        self.position = position
        self.size = size

    def copy(self):
        """Return an independent copy of this cursor (not of the bytes)."""
        return Context(
            self.document, self.start_position, self.position, self.size)

    __copy__ = copy

    def __repr__(self):
        return '<Context start={} position={} size={}>'.format(
            self.start_position, self.position, self.size)

    @property
    def end(self):
        """Return the offset just past this scope's terminator byte."""
        return self.start_position - util.INT32_STRUCT.size + self.size

    @property
    def at_end(self):
        """Return True if the cursor sits on the scope's terminator."""
        return self.position >= self.end - 1

    def check(self):
        """Raise BadContext unless this context points into its document."""
        document = self.document
        if document is None or self.start_position is None or \
                self.position is None or self.size is None:
            raise errors.BadContext('Context is not initialized.')
        if document.finalized:
            raise errors.BadContext('Context refers to a finalized document.')

        limit = document.size
        if not 0 <= self.start_position <= limit:
            raise errors.BadContext(
                'Start position {} outside of the document.'.format(
                    self.start_position))
        if not 0 <= self.position <= limit:
            raise errors.BadContext(
                'Position {} outside of the document.'.format(self.position))
        if self.position < self.start_position:
            raise errors.BadContext(
                'Position {} is before the start of the scope.'.format(
                    self.position))
        if self.size < util.MIN_DOCUMENT_SIZE or \
                self.start_position < util.INT32_STRUCT.size or \
                self.end > limit:
            raise errors.BadContext(
                'Scope of {} bytes does not fit the document.'.format(
                    self.size))

    #
    # Element helpers
    #
    def _name_length(self, pos):
        return util.scan_name_length(self.document.data, pos, self.end)

    def _payload_offset(self, pos):
        # Skip the tag byte, the name and the name's null-terminator.
        return pos + self._name_length(pos) + 1

    def _name_at(self, pos):
        """Return the raw name of the element at 'pos'.

        Returns None for the scope terminator.
        """
        data = self.document.data
        if pos >= self.end or data[pos] == 0x00:
            return None
        length = self._name_length(pos)
        return data[pos + 1:pos + length]

    def _skip(self, pos):
        """Return the offset of the element that follows the one at 'pos'."""
        data = self.document.data
        rule = util.element_size(data[pos], fpos=pos)
        pos = self._payload_offset(pos)
        offset = rule.fixed
        # If the size is not known up front, it needs to be read.
        if rule.prefixed:
            length = util.unpack_from(
                util.INT32_STRUCT, data, pos, self.end)
            if length < 0:
                raise errors.CorruptedDocument(
                    'Negative length prefix: {}'.format(length), fpos=pos)
            offset += length
        return pos + offset

    def _matches(self, pos, key, element_types):
        data = self.document.data
        if pos >= self.end or data[pos] not in element_types:
            return False
        return key is None or self._name_at(pos) == key

    def _locate(self, name, element_types):
        """Move the cursor onto the next element matching name AND type.

        The element under the cursor is used as-is if it matches. Otherwise,
        this fetches by name until the element landed on also has one of
        the given types. Same-named elements of other types are skipped.

        On failure, the cursor is restored before the error is raised.
        """
        key = util.format_key(name)
        if self._matches(self.position, key, element_types):
            return
        prev_position = self.position
        try:
            self.fetch(name)
            while self.document.data[self.position] not in element_types:
                self.fetch(name)
        except errors.BSONError:
            self.position = prev_position
            raise

    #
    # Traversal
    #
    def fetch(self, name=None):
        """Move the cursor to the next sibling element named 'name'.

        The element under the cursor is always skipped first. If 'name' is
        None (or empty), this skips exactly one element; that may leave the
        cursor on the scope's terminator (see 'at_end'). Raises
        PositionOutOfRange, without moving the cursor, if no such element
        exists in the rest of the scope.

        Returns this context.
        """
        self.check()
        key = util.format_key(name)
        data = self.document.data
        end = self.end
        pos = self.position
        while True:
            # Nothing can follow the terminator.
            if pos >= end or data[pos] == 0x00:
                raise errors.PositionOutOfRange(_decode_name(key) or '')
            pos = self._skip(pos)
            if pos >= end:
                raise errors.PositionOutOfRange(_decode_name(key) or '')
            if key is None or self._name_at(pos) == key:
                break
        self.position = pos
        return self

    def open(self, name=None):
        """Return a new Context for a nested document or array.

        If 'name' is None, the element under the cursor is opened, and it
        must be a document or array. Otherwise the nearest document/array
        with that name is opened. This context is not moved.
        """
        self.check()
        child = self.copy()
        if util.format_key(name) is None:
            if not child._matches(
                    child.position, None, util.CONTAINER_TYPES):
                raise errors.PositionOutOfRange(
                    '', 'No document or array under the cursor.')
        else:
            child._locate(name, util.CONTAINER_TYPES)

        data = self.document.data
        # The nested document may not overlap this scope's terminator.
        bound = self.end - 1
        payload = child._payload_offset(child.position)
        size = util.unpack_from(util.INT32_STRUCT, data, payload, bound)
        if size < util.MIN_DOCUMENT_SIZE or payload + size > bound:
            raise errors.CorruptedDocument(
                'Invalid nested document length: {}'.format(size),
                fpos=payload)
        if data[payload + size - 1] != 0x00:
            raise errors.CorruptedDocument(
                'Missing nested document terminator',
                fpos=payload + size - 1)

        child.start_position = child.position = \
            payload + util.INT32_STRUCT.size
        child.size = size
        logger.debug('Opened scope at offset %d (%d bytes)', payload, size)
        return child

    def peek(self):
        """Return (element_type, name) for the element under the cursor.

        The name is returned as a string, or as bytes if it is not valid
        UTF-8. Raises PositionOutOfRange at the end of the scope.
        """
        self.check()
        pos = self.position
        if pos >= self.end or self.document.data[pos] == 0x00:
            raise errors.PositionOutOfRange('', 'Cursor is at end of scope.')
        element_type = util.element_type(self.document.data[pos], fpos=pos)
        return element_type, _decode_name(self._name_at(pos))

    def elements(self):
        """Iterate over (name, element_type) from the cursor to the scope end.

        This does not move the cursor.
        """
        cursor = self.copy()
        while not cursor.at_end:
            element_type, name = cursor.peek()
            yield name, element_type
            cursor.fetch()

    #
    # Extraction
    #
    def _extract(self, name, element_type, parse):
        self.check()
        prev_position = self.position
        self._locate(name, (element_type,))
        try:
            payload = self._payload_offset(self.position)
            value, self.position = parse(
                self.document.data, payload, self.end - 1)
        except errors.BSONError:
            self.position = prev_position
            raise
        return value

    def extract_int32(self, name=None):
        """Read the next int32 element (with the given name) as an int."""
        return self._extract(name, ElementType.INT32, _parse_int32)

    def extract_int64(self, name=None):
        """Read the next int64 element (with the given name) as an int."""
        return self._extract(name, ElementType.INT64, _parse_int64)

    def extract_double(self, name=None):
        """Read the next double element (with the given name) as a float."""
        return self._extract(name, ElementType.DOUBLE, _parse_64bit_float)

    def extract_boolean(self, name=None):
        """Read the next boolean element (with the given name) as a bool."""
        return self._extract(name, ElementType.BOOLEAN, _parse_bool)

    def extract_datetime(self, name=None, as_datetime=False):
        """Read the next UTC datetime element (with the given name).

        By default this returns the raw count of milliseconds since the Unix
        epoch. If 'as_datetime=True', a timezone-aware datetime (in UTC) is
        returned instead.
        """
        return self._extract(
            name, ElementType.DATETIME,
            partial(_parse_utc_datetime, as_datetime=as_datetime))

    def extract_string(self, name=None, decode=True):
        """Read the next UTF-8 string element (with the given name).

        The trailing null-terminator is not part of the result. If
        'decode=False', the raw bytes are returned instead of a str.
        """
        return self._extract(
            name, ElementType.STRING,
            partial(_parse_utf8_string, decode=decode))

    def extract_binary(self, name=None):
        """Read the next binary element (with the given name) as bytes."""
        return self._extract(name, ElementType.BINARY, _parse_binary)


#
# Functional interface
#
def _require(context):
    if context is None:
        raise errors.BadContext('No context given.')
    return context


def init(buffer, length=None):
    """Validate a BSON document and return a Context for its root scope.

    'buffer' can be any bytes-like object or an existing Document. 'length'
    is the declared length of the document; it defaults to the length of
    the buffer (or the size of the Document).
    """
    if buffer is None:
        raise errors.InvalidInput('No buffer given for the document.')
    if isinstance(buffer, Document):
        document = buffer
        if length is not None and length != document.size:
            raise errors.InvalidInput(
                'Length {} does not match the document size {}'.format(
                    length, document.size))
    else:
        document = Document(buffer, length)
    document.validate()
    logger.debug('Initialized document of %d bytes', document.size)

    start = util.INT32_STRUCT.size
    return Context(document, start, start, document.size)


def open(name, context):
    """Return a child Context for the nested document/array 'name'."""
    return _require(context).open(name)


def fetch(name, context):
    """Advance 'context' to the next element named 'name' and return it."""
    return _require(context).fetch(name)


def check_context(context):
    """Raise BadContext unless 'context' points into its document."""
    _require(context).check()


def extract_int32(name, context):
    return _require(context).extract_int32(name)


def extract_int64(name, context):
    return _require(context).extract_int64(name)


def extract_double(name, context):
    return _require(context).extract_double(name)


def extract_boolean(name, context):
    return _require(context).extract_boolean(name)


def extract_datetime(name, context, as_datetime=False):
    return _require(context).extract_datetime(name, as_datetime=as_datetime)


def extract_string(name, context, decode=True):
    return _require(context).extract_string(name, decode=decode)


def extract_binary(name, context):
    return _require(context).extract_binary(name)


def finalize(document):
    """Release the bytes held by 'document'."""
    if document is None:
        raise errors.DocumentNotFound('No document given.')
    document.finalize()
