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
"""tool.py.

Command-line tool that prints the contents of a BSON file.

This is a thin consumer of the navigator: it loads the whole file into
memory, then walks it with ``open()``, ``fetch()`` and the typed extractors.
Like the rest of the package, the traversal keeps its own stack of contexts
instead of recursing, so deeply nested documents can be printed as well.
"""
import sys
import logging
import argparse
from collections import deque

# Local imports.
import bsoncursor.codec_util as util
import bsoncursor.errors as errors
from bsoncursor.codec_util import ElementType
from bsoncursor.cursor import Context, datetime_from_ms, init
from bsoncursor.document import Document


logger = logging.getLogger(__name__)


def _extract_datetime(cursor):
    utc_ms = cursor.extract_datetime()
    try:
        return datetime_from_ms(utc_ms)
    except OverflowError:
        # Valid BSON, but out of the datetime range; print the raw value.
        return utc_ms


_EXTRACTORS = {
    ElementType.DOUBLE: Context.extract_double,
    ElementType.STRING: Context.extract_string,
    ElementType.BINARY: Context.extract_binary,
    ElementType.BOOLEAN: Context.extract_boolean,
    ElementType.DATETIME: _extract_datetime,
    ElementType.INT32: Context.extract_int32,
    ElementType.INT64: Context.extract_int64,
}


def _format_value(value):
    if isinstance(value, bytes):
        return value.hex()
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return str(value)


def load_file(path):
    """Read the file at 'path' into memory."""
    with open(path, 'rb') as stm:
        return stm.read()


def dump_context(ctx, out, max_depth=None):
    """Write one line per element, starting at the cursor of 'ctx'.

    Nested documents and arrays are descended into unless that would go
    deeper than 'max_depth' levels. 'ctx' itself is not moved.
    """
    current_stack = deque()
    current_stack.append((ctx.copy(), ''))
    while current_stack:
        cursor, prefix = current_stack[-1]
        if cursor.at_end:
            current_stack.pop()
            continue

        element_type, name = cursor.peek()
        path = '{}.{}'.format(prefix, name) if prefix else str(name)
        type_name = element_type.name.lower()
        if element_type in util.CONTAINER_TYPES:
            out.write('{} ({})\n'.format(path, type_name))
            if max_depth is None or len(current_stack) <= max_depth:
                current_stack.append((cursor.open(), path))
            # Move the parent past the nested scope; the child context is
            # independent of it.
            cursor.fetch()
            continue

        # The element under the cursor already has the right type, so this
        # reads it directly and moves on to the next element.
        value = _EXTRACTORS[element_type](cursor)
        out.write('{} ({}): {}\n'.format(path, type_name, _format_value(value)))


def run(argv=None, out=None):
    """Main entrypoint. Returns the exit status."""
    parser = argparse.ArgumentParser(
        description="Print the contents of a BSON file.")
    parser.add_argument('path', help="Path to the BSON file to print.")
    parser.add_argument('--max-depth', type=int, default=None, help=(
        "Do not descend more than this many levels of nested documents."))
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help="Increase output verbosity.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s')
    if out is None:
        out = sys.stdout

    try:
        data = load_file(args.path)
    except OSError as exc:
        logger.error('Unable to read %s: %s', args.path, exc)
        return 1

    with Document(data) as document:
        try:
            ctx = init(document)
            dump_context(ctx, out, max_depth=args.max_depth)
        except errors.BSONError as exc:
            logger.error('Invalid BSON in %s: %s', args.path, exc)
            return 1
    return 0


if __name__ == '__main__':
    sys.exit(run())
