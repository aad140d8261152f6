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
"""document_test.py.

Unittests for the Document type and its lifecycle.
"""
import unittest

# Test imports
import bsoncursor
from bsoncursor import errors
from bsoncursor.document import Document


# dict(value=123)
INT32_DOC = b'\x10\x00\x00\x00\x10value\x00{\x00\x00\x00\x00'


class DocumentTests(unittest.TestCase):

    def test_document_size(self):
        doc = Document(INT32_DOC)
        self.assertEqual(16, doc.size)
        self.assertEqual(16, len(doc))
        self.assertEqual(INT32_DOC, doc.data)
        self.assertFalse(doc.finalized)

    def test_declared_size(self):
        doc = Document(INT32_DOC + b'trailing', 16)
        self.assertEqual(16, doc.size)
        doc.validate()

    def test_missing_buffer(self):
        with self.assertRaises(errors.InvalidInput):
            Document(None)

    def test_buffer_is_copied(self):
        buff = bytearray(INT32_DOC)
        doc = Document(buff)
        buff[11] = 0x01
        ctx = bsoncursor.init(doc)
        self.assertEqual(123, ctx.extract_int32('value'))

    def test_validate(self):
        Document(INT32_DOC).validate()

    def test_validate_length_mismatch(self):
        with self.assertRaises(errors.CorruptedDocument):
            Document(INT32_DOC, 15).validate()
        with self.assertRaises(errors.CorruptedDocument):
            Document(INT32_DOC, 17).validate()

    def test_validate_too_short(self):
        with self.assertRaises(errors.CorruptedDocument):
            Document(b'\x04\x00\x00\x00').validate()
        with self.assertRaises(errors.CorruptedDocument):
            Document(b'').validate()

    def test_finalize(self):
        doc = Document(INT32_DOC)
        doc.finalize()
        self.assertTrue(doc.finalized)
        self.assertIsNone(doc.data)
        self.assertEqual(0, doc.size)

    def test_finalize_twice(self):
        doc = Document(INT32_DOC)
        bsoncursor.finalize(doc)
        # The second call should just do nothing.
        bsoncursor.finalize(doc)
        self.assertTrue(doc.finalized)

    def test_finalize_missing_document(self):
        with self.assertRaises(errors.DocumentNotFound):
            bsoncursor.finalize(None)

    def test_validate_after_finalize(self):
        doc = Document(INT32_DOC)
        doc.finalize()
        with self.assertRaises(errors.InvalidInput):
            doc.validate()

    def test_context_manager(self):
        with Document(INT32_DOC) as doc:
            ctx = bsoncursor.init(doc)
            self.assertEqual(123, ctx.extract_int32('value'))
        self.assertTrue(doc.finalized)

    def test_repr(self):
        doc = Document(INT32_DOC)
        self.assertEqual('<Document size=16>', repr(doc))
        doc.finalize()
        self.assertEqual('<Document (finalized)>', repr(doc))


if __name__ == '__main__':
    unittest.main()
