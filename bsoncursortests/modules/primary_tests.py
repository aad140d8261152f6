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
"""primary_tests.py.

Tests that read a complete event record the way a consumer would.
"""
import unittest

import bson

# Module under test
import bsoncursor


# An event record, as written by the event logger:
#   event.type/source/severity: int32
#   event.message: string
#   event.param: array of [num, type, (value)]; 'value' exists for type 3.
EVENT_RECORD = {
    'event': {
        'type': 1,
        'source': 2,
        'severity': 3,
        'message': 'boom',
        'param': [
            {'num': 0, 'type': 1},
            {'num': 1, 'type': 3, 'value': 'disk full'},
            {'num': 2, 'type': 2},
        ],
    },
}


class EventRecordTests(unittest.TestCase):

    def setUp(self):
        self.document = bsoncursor.Document(bson.encode(EVENT_RECORD))
        self.addCleanup(bsoncursor.finalize, self.document)

    def test_read_event_record(self):
        ctx = bsoncursor.init(self.document)
        event = bsoncursor.open(None, ctx)

        self.assertEqual(1, bsoncursor.extract_int32('type', event))
        self.assertEqual(2, bsoncursor.extract_int32('source', event))
        self.assertEqual(3, bsoncursor.extract_int32('severity', event))
        self.assertEqual('boom', bsoncursor.extract_string(None, event))

        param = bsoncursor.open('param', event)
        params = []
        for _ in range(3):
            item = bsoncursor.open(None, param)
            num = bsoncursor.extract_int32(None, item)
            kind = bsoncursor.extract_int32(None, item)
            value = None
            if kind == 3:
                value = bsoncursor.extract_string(None, item)
            params.append((num, kind, value))
            bsoncursor.fetch(None, param)

        self.assertEqual([
            (0, 1, None),
            (1, 3, 'disk full'),
            (2, 2, None),
        ], params)
        with self.assertRaises(bsoncursor.PositionOutOfRange):
            bsoncursor.fetch(None, param)

    def test_read_event_record_out_of_order(self):
        ctx = bsoncursor.init(self.document)
        event = ctx.open('event')
        # Lookups only move forward, so each one starts from a copy.
        self.assertEqual('boom', event.copy().extract_string('message'))
        self.assertEqual(3, event.copy().extract_int32('severity'))
        self.assertEqual(1, event.copy().extract_int32('type'))

    def test_search_by_name_inside_array_items(self):
        ctx = bsoncursor.init(self.document)
        param = ctx.open('event').open('param')
        item = param.open('1')
        self.assertEqual('disk full', item.extract_string('value'))

    def test_value_type_is_checked(self):
        ctx = bsoncursor.init(self.document)
        event = ctx.open('event')
        # 'message' is a string, so no int32 can be found under that name.
        with self.assertRaises(bsoncursor.PositionOutOfRange):
            event.extract_int32('message')
        self.assertEqual(1, event.extract_int32('type'))

    def test_truncated_sub_document(self):
        data = bytearray(bson.encode(EVENT_RECORD))
        # Bump the length of the 'event' document by one byte, so that it
        # ends past the end of the root document.
        data[11] += 1
        ctx = bsoncursor.init(bytes(data))
        with self.assertRaises(bsoncursor.CorruptedDocument):
            ctx.open('event')


if __name__ == '__main__':
    unittest.main()
