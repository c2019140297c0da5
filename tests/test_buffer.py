import unittest

import pytest

from kelp.buffer import Buffer, Row


class RowRenderTests(unittest.TestCase):
    def test_plain_text_renders_as_is(self):
        row = Row(b"hello")
        self.assertEqual(row.render, b"hello")

    def test_tab_expands_to_next_tab_stop(self):
        row = Row(b"a\tb")
        self.assertEqual(row.render, b"a" + b" " * 7 + b"b")

    def test_tab_on_a_stop_takes_a_full_stop(self):
        row = Row(b"\tx")
        self.assertEqual(row.render, b" " * 8 + b"x")

    def test_custom_tab_stop(self):
        row = Row(b"ab\tc", tab_stop=4)
        self.assertEqual(row.render, b"ab  c")

    def test_render_refreshed_after_edit(self):
        buf = Buffer()
        buf.insert_row(0, b"ab")
        row = buf.rows[0]
        buf.row_insert_char(row, 1, ord("\t"))
        self.assertEqual(row.render, b"a" + b" " * 7 + b"b")


class CoordinateTests(unittest.TestCase):
    def test_cx_to_rx_without_tabs(self):
        row = Row(b"hello")
        self.assertEqual(row.cx_to_rx(3), 3)

    def test_cx_to_rx_after_tab(self):
        row = Row(b"\tab")
        self.assertEqual(row.cx_to_rx(0), 0)
        self.assertEqual(row.cx_to_rx(1), 8)
        self.assertEqual(row.cx_to_rx(2), 9)

    def test_rx_to_cx_inside_tab_maps_to_tab(self):
        row = Row(b"\tab")
        self.assertEqual(row.rx_to_cx(3), 0)

    def test_rx_to_cx_past_end_is_clamped(self):
        row = Row(b"a\tb")
        self.assertEqual(row.rx_to_cx(100), 3)

    def test_inverse_for_every_index(self):
        row = Row(b"x\ty\t\tz end")
        for cx in range(len(row) + 1):
            self.assertEqual(row.rx_to_cx(row.cx_to_rx(cx)), cx)


class BufferEditTests(unittest.TestCase):
    def setUp(self):
        self.buf = Buffer()
        self.buf.insert_row(0, b"first")
        self.buf.insert_row(1, b"second")
        self.buf.dirty = 0

    def test_insert_row_in_the_middle(self):
        self.buf.insert_row(1, b"middle")
        self.assertEqual([bytes(r.chars) for r in self.buf.rows], [b"first", b"middle", b"second"])
        self.assertEqual(self.buf.dirty, 1)

    def test_insert_row_out_of_range_is_ignored(self):
        self.buf.insert_row(5, b"nope")
        self.buf.insert_row(-1, b"nope")
        self.assertEqual(self.buf.numrows, 2)
        self.assertEqual(self.buf.dirty, 0)

    def test_delete_row(self):
        self.buf.delete_row(0)
        self.assertEqual([bytes(r.chars) for r in self.buf.rows], [b"second"])
        self.assertEqual(self.buf.dirty, 1)

    def test_delete_row_out_of_range_is_ignored(self):
        self.buf.delete_row(2)
        self.assertEqual(self.buf.numrows, 2)
        self.assertEqual(self.buf.dirty, 0)

    def test_insert_char_past_end_appends(self):
        row = self.buf.rows[0]
        self.buf.row_insert_char(row, 99, ord("!"))
        self.assertEqual(bytes(row.chars), b"first!")

    def test_insert_then_delete_restores_row(self):
        row = self.buf.rows[1]
        self.buf.row_insert_char(row, 3, ord("X"))
        self.assertEqual(bytes(row.chars), b"secXond")
        self.buf.row_delete_char(row, 3)
        self.assertEqual(bytes(row.chars), b"second")
        self.assertEqual(len(row), 6)
        self.assertEqual(self.buf.dirty, 2)

    def test_delete_char_out_of_range_is_ignored(self):
        row = self.buf.rows[0]
        self.buf.row_delete_char(row, -1)
        self.buf.row_delete_char(row, 5)
        self.assertEqual(bytes(row.chars), b"first")
        self.assertEqual(self.buf.dirty, 0)

    def test_row_append_joins_lines(self):
        self.buf.row_append(self.buf.rows[0], self.buf.rows[1].chars)
        self.assertEqual(bytes(self.buf.rows[0].chars), b"firstsecond")
        self.assertEqual(self.buf.rows[0].render, b"firstsecond")

    def test_truncate_row(self):
        self.buf.truncate_row(self.buf.rows[1], 3)
        self.assertEqual(bytes(self.buf.rows[1].chars), b"sec")


def test_load_strips_line_endings(tmp_path):
    path = tmp_path / "crlf.txt"
    path.write_bytes(b"one\r\ntwo\n\nthree")
    buf = Buffer()
    buf.dirty = 4
    buf.load(str(path))
    assert [bytes(r.chars) for r in buf.rows] == [b"one", b"two", b"", b"three"]
    assert buf.dirty == 0
    assert buf.filename == str(path)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        Buffer().load(str(tmp_path / "nope.txt"))


def test_serialize_adds_newline_per_row():
    buf = Buffer()
    buf.insert_row(0, b"a")
    buf.insert_row(1, b"")
    buf.insert_row(2, b"\tb")
    assert buf.serialize() == b"a\n\n\tb\n"


def test_serialize_load_round_trip(tmp_path):
    original = b"caf\xc3\xa9\n\tindented\n\nbinary \xff\xfe\n"
    path = tmp_path / "round.txt"
    path.write_bytes(original)
    buf = Buffer()
    buf.load(str(path))
    assert buf.serialize() == original

    again = tmp_path / "again.txt"
    again.write_bytes(buf.serialize())
    other = Buffer()
    other.load(str(again))
    assert other.serialize() == buf.serialize()


def test_empty_buffer_serializes_to_nothing():
    assert Buffer().serialize() == b""
