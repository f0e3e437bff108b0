"""Shared fixtures for depsync tests."""

import json

import pytest

from constants import Constants


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo Constants overrides applied by config and CLI handling."""
    saved = {
        name: value
        for name, value in vars(Constants).items()
        if name.isupper()
    }
    yield
    for name, value in saved.items():
        setattr(Constants, name, value)


@pytest.fixture
def write_json():
    """Write a JSON document into a directory and return its path."""

    def _write(directory, name, data):
        path = directory / name
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        return path

    return _write
