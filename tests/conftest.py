from __future__ import annotations

import json
from pathlib import Path

import pytest

from deployment_tools.config import RegistryConfig

_ALLOWED_MARKERS = {"unit", "integration"}

VERSION = "1.4.1"


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


def write_record(path: Path, network_addresses: dict, **fields: object) -> Path:
    record = {"version": VERSION, "contractName": path.stem, "released": True, **fields}
    record["networkAddresses"] = network_addresses
    path.write_text(json.dumps(record, indent=2) + "\n", encoding="utf-8")
    return path


def read_record(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def config(tmp_path: Path) -> RegistryConfig:
    return RegistryConfig(assets_dir=tmp_path / "src" / "assets", version_prefix="v", record_suffix=".json")


@pytest.fixture
def version_dir(config: RegistryConfig) -> Path:
    path = config.version_dir(VERSION)
    path.mkdir(parents=True)
    return path
