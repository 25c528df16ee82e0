#!/usr/bin/env python3
"""
读取层 - 从字节流逐行读取并按分隔符拆列

分隔符按字符集合匹配：多字符分隔符中的任一字符都会切分，
而不是整串匹配。不支持引号和转义。
"""
import io
import re
import asyncio
import logging
from typing import Iterator, Optional, Tuple

logger = logging.getLogger(__name__)


class CSVReader:
    """分隔符文本读取器

    独占持有输入流，直到 dispose()。

    协议说明：
    - 每次读取一行，行尾换行符被去掉
    - EOF 返回空序列，不是错误
    - 列序列是惰性的，只能迭代一次
    """

    def __init__(self, separator: str, source, encoding: str = "utf-8-sig"):
        """
        初始化读取器

        Args:
            separator: 分隔符字符串，每个字符都是一个分隔符
            source: 二进制输入流
            encoding: 文本编码
        """
        if not separator:
            raise ValueError("separator is None or empty")
        if source is None:
            raise ValueError("source is None")

        # 只在构造时计算一次
        self._separator_chars: Tuple[str, ...] = tuple(separator)
        self._pattern = re.compile(
            "[" + "".join(re.escape(c) for c in self._separator_chars) + "]"
        )
        self._source = source
        self._reader = io.TextIOWrapper(source, encoding=encoding, newline=None)
        self._disposed = False
        self._line_count = 0

    @property
    def separator_chars(self) -> Tuple[str, ...]:
        """分隔符字符"""
        return self._separator_chars

    @property
    def line_count(self) -> int:
        """已读取的行数"""
        return self._line_count

    async def read_columns(self, max_columns: int) -> Iterator[str]:
        """
        读取下一行并返回最多 max_columns 列

        Args:
            max_columns: 最多返回的列数，多余的列被忽略

        Returns:
            列迭代器，EOF 时为空
        """
        if max_columns < 0:
            raise ValueError(f"max_columns must not be negative, got {max_columns}")

        line = await asyncio.to_thread(self._read_line)
        if line is None:
            logger.debug("[Reader] EOF reached")
            return iter(())

        self._line_count += 1
        logger.debug(f"[Reader] Line {self._line_count}: {line[:200]!r}")
        return self._iter_columns(line, max_columns)

    def _read_line(self) -> Optional[str]:
        line = self._reader.readline()
        if not line:
            return None
        if line.endswith("\n"):
            line = line[:-1]
        return line

    def _iter_columns(self, line: str, max_columns: int) -> Iterator[str]:
        """按需切出列，不复制整行的拆分结果"""
        if max_columns == 0:
            return
        start = 0
        count = 0
        for match in self._pattern.finditer(line):
            yield line[start:match.start()]
            count += 1
            if count >= max_columns:
                return
            start = match.end()
        yield line[start:]

    def dispose(self):
        """释放读取器和底层流（可重复调用）"""
        if self._disposed:
            return
        self._disposed = True
        try:
            self._reader.close()
        finally:
            self._source.close()
        logger.debug(f"[Reader] Disposed after {self._line_count} lines")

    def __enter__(self) -> 'CSVReader':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()
