"""Tests for the shared core package."""

import ast
from pathlib import Path

import pytest

import speech_detector.core as core
from speech_detector.core.events import VolumeLevel
from speech_detector.core.runtime import RuntimeState

CORE_DIR = Path(core.__file__).parent


def imported_modules(path):
    tree = ast.parse(path.read_text())
    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom):
            yield "." * node.level + (node.module or "")
        elif isinstance(node, ast.Import):
            for alias in node.names:
                yield alias.name


@pytest.mark.parametrize("path", sorted(CORE_DIR.glob("*.py")), ids=lambda p: p.name)
def test_core_does_not_import_feature_packages(path):
    for module in imported_modules(path):
        assert not module.startswith(".."), f"{path.name} imports {module}"
        assert not module.startswith("speech_detector."), f"{path.name} imports {module}"


def test_runtime_state_starts_muted():
    assert RuntimeState.create().level is VolumeLevel.MUTE
