#!/usr/bin/env python3
"""
写入层 - 把列拼成一行写入字节流

列之间直接用分隔符整串连接，行尾追加平台换行符。
"""
import io
import asyncio
import logging

logger = logging.getLogger(__name__)


class CSVWriter:
    """分隔符文本写入器

    独占持有输出流，直到 dispose()。
    """

    def __init__(self, separator: str, target, encoding: str = "utf-8"):
        """
        初始化写入器

        Args:
            separator: 分隔符字符串
            target: 二进制输出流
            encoding: 文本编码
        """
        if not separator:
            raise ValueError("separator is None or empty")
        if target is None:
            raise ValueError("target is None")

        self._separator = separator
        self._target = target
        # newline=None: "\n" 写出时转换为 os.linesep
        self._writer = io.TextIOWrapper(target, encoding=encoding, newline=None)
        self._disposed = False
        self._line_count = 0

    @property
    def line_count(self) -> int:
        """已写入的行数"""
        return self._line_count

    async def write_columns(self, *columns: str):
        """
        写入一行

        Args:
            columns: 各列的值

        注意：
        - 不会每次 flush，dispose() 时才保证落盘
        """
        line = self._separator.join(columns)
        await asyncio.to_thread(self._writer.write, line + "\n")
        self._line_count += 1
        logger.debug(f"[Writer] Line {self._line_count}: {line[:200]!r}")

    def flush(self):
        """把缓冲的数据写入底层流"""
        self._writer.flush()

    def dispose(self):
        """刷新并释放写入器和底层流（可重复调用）

        flush 失败时仍会关闭流，异常照常抛出。
        """
        if self._disposed:
            return
        self._disposed = True
        try:
            self._writer.flush()
        finally:
            try:
                self._writer.close()
            finally:
                self._target.close()
        logger.debug(f"[Writer] Disposed after {self._line_count} lines")

    def __enter__(self) -> 'CSVWriter':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()
