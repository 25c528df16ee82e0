#!/usr/bin/env python3
"""
读写层模块

按分隔符逐行读写扁平文本记录。
"""
from .reader import CSVReader
from .writer import CSVWriter
from .reader_writer import Mode, CSVReaderWriter, create_reader_writer

__all__ = [
    # reader
    "CSVReader",
    # writer
    "CSVWriter",
    # reader_writer
    "Mode",
    "CSVReaderWriter",
    "create_reader_writer",
]
