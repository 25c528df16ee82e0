#!/usr/bin/env python3
"""
测试夹具：在临时目录里生成数据文件
"""
import pytest

from address_processing.core.config import Config, set_config

CONTACTS = (
    "Shelby Macias\t3027 Lorem St.|Kokomo|Hertfordshire|L9T 3D5|England\n"
    "Porter Coffey\tAp #827-9064 Sapien. Rd.|Palo Alto|Fl.|HM0G 0YR|Scotland\n"
    "Noelani Ward\t637-8986 Tincidunt Ave|Cape Coral|CO|F2M 6L0|Wales\n"
)


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """每个测试使用默认配置，不受环境变量影响"""
    monkeypatch.delenv("ADDRESS_CSV_SEPARATOR", raising=False)
    monkeypatch.delenv("ADDRESS_CSV_DEBUG", raising=False)
    config = Config()
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def contacts_file(tmp_path):
    path = tmp_path / "contacts.csv"
    path.write_text(CONTACTS, encoding="utf-8")
    return path


@pytest.fixture
def empty_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_bytes(b"")
    return path


@pytest.fixture
def one_column_file(tmp_path):
    path = tmp_path / "one-column.csv"
    path.write_text("hello\n", encoding="utf-8")
    return path
