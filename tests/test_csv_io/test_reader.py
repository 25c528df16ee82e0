#!/usr/bin/env python3
"""
读取层单元测试
"""
import asyncio
import io

import pytest

from address_processing.csv_io.reader import CSVReader


def read_columns(reader, max_columns):
    return list(asyncio.run(reader.read_columns(max_columns)))


class TestConstruction:
    """构造参数测试"""

    def test_separator_chars_populated(self):
        """测试单字符分隔符"""
        with CSVReader("\t", io.BytesIO()) as reader:
            assert set(reader.separator_chars) == {"\t"}

    def test_multi_character_separator(self):
        """测试多字符分隔符拆成字符集合"""
        with CSVReader("test", io.BytesIO()) as reader:
            assert set(reader.separator_chars) == set("test")

    def test_none_separator(self):
        with pytest.raises(ValueError):
            CSVReader(None, io.BytesIO())

    def test_none_source(self):
        with pytest.raises(ValueError):
            CSVReader("\t", None)

    def test_separator_chars_not_recomputed(self):
        """测试读取后分隔符集合不变"""
        with CSVReader(",;", io.BytesIO(b"a,b;c\n")) as reader:
            before = reader.separator_chars
            read_columns(reader, 3)
            assert reader.separator_chars is before


class TestReadColumns:
    """read_columns 测试"""

    def test_read_two_columns(self):
        reader = CSVReader("\t", io.BytesIO(b"a\tb\tc\n"))
        assert read_columns(reader, 2) == ["a", "b"]
        reader.dispose()

    def test_short_line_is_not_error(self):
        """测试列数不足时返回更少的列"""
        reader = CSVReader("\t", io.BytesIO(b"hello\n"))
        assert read_columns(reader, 2) == ["hello"]

    def test_eof_returns_empty(self):
        reader = CSVReader("\t", io.BytesIO(b""))
        assert read_columns(reader, 2) == []
        assert reader.line_count == 0

    def test_empty_line_has_one_empty_column(self):
        reader = CSVReader("\t", io.BytesIO(b"\nnext\n"))
        assert read_columns(reader, 2) == [""]
        assert read_columns(reader, 2) == ["next"]

    def test_last_line_without_newline(self):
        reader = CSVReader("\t", io.BytesIO(b"a\tb\nc\td"))
        assert read_columns(reader, 2) == ["a", "b"]
        assert read_columns(reader, 2) == ["c", "d"]
        assert read_columns(reader, 2) == []

    def test_crlf_line_ending(self):
        reader = CSVReader("\t", io.BytesIO(b"a\tb\r\nc\td\r\n"))
        assert read_columns(reader, 2) == ["a", "b"]
        assert read_columns(reader, 2) == ["c", "d"]

    def test_character_class_split(self):
        """测试多字符分隔符按任一字符切分，而不是整串"""
        reader = CSVReader("ab", io.BytesIO(b"1a2b3ab4\n"))
        assert read_columns(reader, 10) == ["1", "2", "3", "", "4"]

    def test_regex_metacharacters_in_separator(self):
        reader = CSVReader("|.", io.BytesIO(b"x|y.z\n"))
        assert read_columns(reader, 3) == ["x", "y", "z"]

    def test_zero_max_columns(self):
        reader = CSVReader("\t", io.BytesIO(b"a\tb\n"))
        assert read_columns(reader, 0) == []
        assert reader.line_count == 1

    def test_negative_max_columns(self):
        reader = CSVReader("\t", io.BytesIO(b"a\tb\n"))
        with pytest.raises(ValueError):
            asyncio.run(reader.read_columns(-1))

    def test_columns_are_lazy_and_single_pass(self):
        reader = CSVReader("\t", io.BytesIO(b"a\tb\tc\n"))
        columns = asyncio.run(reader.read_columns(3))
        assert next(columns) == "a"
        assert list(columns) == ["b", "c"]
        assert list(columns) == []

    def test_line_count(self):
        reader = CSVReader("\t", io.BytesIO(b"1\n2\n3\n"))
        for _ in range(4):
            read_columns(reader, 1)
        assert reader.line_count == 3

    def test_utf8_bom_is_skipped(self):
        reader = CSVReader("\t", io.BytesIO(b"\xef\xbb\xbfname\tvalue\n"))
        assert read_columns(reader, 2) == ["name", "value"]


class TestDispose:
    """释放测试"""

    def test_dispose_closes_source(self):
        source = io.BytesIO(b"a\n")
        reader = CSVReader("\t", source)
        reader.dispose()
        assert source.closed

    def test_dispose_is_idempotent(self):
        reader = CSVReader("\t", io.BytesIO())
        reader.dispose()
        reader.dispose()

    def test_dispose_propagates_close_error(self):
        class FailingStream(io.BytesIO):
            failed = False

            def close(self):
                # 只失败一次，让回收时能正常关闭
                if not self.failed:
                    self.failed = True
                    raise OSError("disk went away")
                super().close()

        source = FailingStream()
        reader = CSVReader("\t", source)
        with pytest.raises(OSError):
            reader.dispose()
        assert source.closed


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
