#!/usr/bin/env python3
"""
兼容门面 - 组合读取器和写入器

同时提供两套接口：
- 旧的两列同步接口（read / read_out / write），行为原样保留
- 新的多列异步接口（read_async / write_async）

旧接口里看起来像 bug 的行为（单列行抛 IndexError、read() 拿不到列值）
都有调用方依赖，不要"修复"。
"""
import enum
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, Optional, Tuple

from address_processing.core.config import Config, get_config
from address_processing.csv_io.reader import CSVReader
from address_processing.csv_io.writer import CSVWriter

logger = logging.getLogger(__name__)


class Mode(enum.IntFlag):
    """打开模式

    虽然是 flag 类型，但只能取 READ 或 WRITE 之一，组合值非法。
    """
    READ = 1
    WRITE = 2


class CSVReaderWriter:
    """分隔符文本读写门面

    一个实例最多持有一个读取器和一个写入器。
    状态：未打开 -> 已打开(READ) | 已打开(WRITE) -> 关闭/释放
    """

    def __init__(self, separator: str = "\t", encoding: Optional[str] = None):
        """
        初始化门面

        Args:
            separator: 列分隔符，默认 tab
            encoding: 读写编码，默认取配置
        """
        if not separator:
            raise ValueError("separator is None or empty")

        self._separator = separator
        self._encoding = encoding
        self._reader: Optional[CSVReader] = None
        self._writer: Optional[CSVWriter] = None
        self._disposed = False

        # 同步接口复用的私有事件循环，dispose() 时关闭
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def separator(self) -> str:
        """列分隔符"""
        return self._separator

    def open(self, file_name: str, mode: Mode):
        """
        按模式打开文件

        读和写同一个文件需要调用两次。

        Args:
            file_name: 文件路径
            mode: Mode.READ 或 Mode.WRITE
        """
        # 只接受单一模式，0、bool 和 READ | WRITE 都非法
        if isinstance(mode, bool) or mode not in (Mode.READ, Mode.WRITE):
            value = int(mode) if isinstance(mode, int) and not isinstance(mode, bool) else mode
            raise ValueError(f"Unknown file mode {value!r} specified for {file_name}")

        # 新组件建好之前不动旧的绑定，open 失败时原来的读写器仍可用
        mode = Mode(mode)
        csv_config = get_config().csv
        if mode == Mode.READ:
            reader = self._create(
                CSVReader, file_name, "rb", self._encoding or csv_config.read_encoding
            )
            self._release(self._reader, mode)
            self._reader = reader
        else:
            # 先落盘旧数据，重新打开同一文件截断后不会再被旧缓冲覆盖
            if self._writer is not None:
                self._writer.flush()
            writer = self._create(
                CSVWriter, file_name, "wb", self._encoding or csv_config.write_encoding
            )
            self._release(self._writer, mode)
            self._writer = writer

        logger.info(f"[CSVReaderWriter] Opened {file_name} ({mode.name})")

    def _create(self, component_type, file_name: str, file_mode: str, encoding: str):
        stream = open(file_name, file_mode)
        try:
            return component_type(self._separator, stream, encoding=encoding)
        except Exception:
            stream.close()
            raise

    def _release(self, component, mode: Mode):
        # 重复 open 同一模式时释放旧的，避免句柄泄漏
        if component is not None:
            logger.warning(f"[CSVReaderWriter] Re-opening in {mode.name} mode, releasing previous stream")
            component.dispose()

    def _run_sync(self, coro):
        """阻塞等待协程完成

        协程在实例私有的事件循环上运行。当前线程已有事件循环时，
        换到实例私有的工作线程上运行，不需要回到调用方的循环，避免死锁。
        """
        if self._loop is None:
            self._loop = asyncio.new_event_loop()
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return self._loop.run_until_complete(coro)
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1)
        return self._executor.submit(self._loop.run_until_complete, coro).result()

    def _close_loop(self):
        loop, self._loop = self._loop, None
        executor, self._executor = self._executor, None
        try:
            if executor is not None:
                executor.shutdown()
        finally:
            if loop is not None:
                loop.close()

    def read(self, column1: Optional[str] = None, column2: Optional[str] = None) -> bool:
        """
        读取下一行，只返回是否成功

        参数只为兼容旧调用方保留，读到的列值不会回传。

        Args:
            column1: 未使用
            column2: 未使用

        Returns:
            True 表示读到了两列
        """
        ok, _, _ = self.read_out()
        return ok

    def read_out(self) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        读取下一行的前两列

        单列行会抛出 IndexError，这是旧行为，调用方依赖它。

        Returns:
            (是否成功, 第一列, 第二列)，EOF 时为 (False, None, None)
        """
        result = list(self._run_sync(self.read_async()))

        if not result:
            return False, None, None

        return True, result[0], result[1]

    async def read_async(self, max_columns: int = 2) -> Iterator[str]:
        """
        异步读取下一行

        Args:
            max_columns: 最多返回的列数

        Returns:
            惰性列迭代器，短行不报错，EOF 时为空
        """
        return await self._require_reader().read_columns(max_columns)

    def write(self, *columns: str):
        """write_async() 的同步版本"""
        self._run_sync(self.write_async(*columns))

    async def write_async(self, *columns: str):
        """
        把各列写成一行追加到已打开的文件

        Args:
            columns: 各列的值
        """
        await self._require_writer().write_columns(*columns)

    def _require_reader(self) -> CSVReader:
        if self._reader is None:
            raise RuntimeError("CSVReaderWriter is not open for reading")
        return self._reader

    def _require_writer(self) -> CSVWriter:
        if self._writer is None:
            raise RuntimeError("CSVReaderWriter is not open for writing")
        return self._writer

    def close(self):
        """关闭当前打开的流

        不设置 disposed 标记，之后再调用 dispose() 是安全的。
        """
        try:
            if self._writer is not None:
                self._writer.dispose()
        finally:
            if self._reader is not None:
                self._reader.dispose()

    def dispose(self):
        """释放所有资源（可重复调用）

        某一步释放失败时，其余资源仍会释放，异常照常抛出。
        """
        if self._disposed:
            return

        reader, self._reader = self._reader, None
        writer, self._writer = self._writer, None
        self._disposed = True
        try:
            if reader is not None:
                reader.dispose()
        finally:
            try:
                if writer is not None:
                    writer.dispose()
            finally:
                self._close_loop()
        logger.info("[CSVReaderWriter] Disposed")

    def get_stats(self) -> dict:
        """
        获取读写统计信息

        Returns:
            统计信息字典
        """
        return {
            "lines_read": self._reader.line_count if self._reader else 0,
            "lines_written": self._writer.line_count if self._writer else 0,
            "disposed": self._disposed,
        }

    def __enter__(self) -> 'CSVReaderWriter':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()


# 便捷函数
def create_reader_writer(config: Optional[Config] = None) -> CSVReaderWriter:
    """按配置创建读写门面"""
    config = config or get_config()
    return CSVReaderWriter(config.csv.separator)
