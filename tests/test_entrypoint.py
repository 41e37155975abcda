"""Smoke tests for the command line entrypoint module."""

from __future__ import annotations

import builtins
import importlib.util
import io
import json
import sys
import types
from contextlib import redirect_stdout
from pathlib import Path

import pytest


def load_entrypoint_module():
    """Load the project entrypoint module without running it as ``__main__``."""
    module_path = Path(__file__).resolve().parents[1] / "__main__.py"
    spec = importlib.util.spec_from_file_location("numeric_input_entry", module_path)
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def entry_module():
    return load_entrypoint_module()


def run_main(entry_module, argv):
    buffer = io.StringIO()
    with redirect_stdout(buffer):
        exit_code = entry_module.main(argv)
    lines = [line for line in buffer.getvalue().splitlines() if line.strip()]
    return exit_code, lines


def test_check_dependencies_reports_missing_pyside6(entry_module, monkeypatch):
    """check_dependencies should fail gracefully when PySide6 is unavailable."""
    real_import = builtins.__import__

    def fake_import(name, globals=None, locals=None, fromlist=(), level=0):  # noqa: D401
        if name.startswith("PySide6"):
            raise ImportError("No module named PySide6")
        return real_import(name, globals, locals, fromlist, level)

    monkeypatch.setattr(builtins, "__import__", fake_import)

    buffer = io.StringIO()
    with redirect_stdout(buffer):
        result = entry_module.check_dependencies()

    output = buffer.getvalue()

    assert result is False
    assert "Missing required dependencies" in output
    assert "PySide6" in output


def test_check_dependencies_succeeds_with_stubbed_gui(entry_module, monkeypatch):
    """check_dependencies should pass when the Qt modules import."""
    pyside6 = types.ModuleType("PySide6")
    pyside6.__version__ = "6.0"
    pyside6.__file__ = "PySide6/__init__.py"

    qtcore = types.ModuleType("PySide6.QtCore")
    qtwidgets = types.ModuleType("PySide6.QtWidgets")
    qtgui = types.ModuleType("PySide6.QtGui")
    pyside6.QtCore = qtcore
    pyside6.QtWidgets = qtwidgets
    pyside6.QtGui = qtgui

    monkeypatch.setitem(sys.modules, "PySide6", pyside6)
    monkeypatch.setitem(sys.modules, "PySide6.QtCore", qtcore)
    monkeypatch.setitem(sys.modules, "PySide6.QtWidgets", qtwidgets)
    monkeypatch.setitem(sys.modules, "PySide6.QtGui", qtgui)

    buffer = io.StringIO()
    with redirect_stdout(buffer):
        result = entry_module.check_dependencies()

    assert result is True


def test_main_reports_missing_dependencies(entry_module, monkeypatch):
    """The main function should exit early when dependencies are missing."""
    monkeypatch.setattr(entry_module, "check_dependencies", lambda: False)

    exit_code, lines = run_main(entry_module, ["--check-deps"])

    assert exit_code == 1
    assert "Some dependencies are missing!" in lines


def test_check_prints_verdict(entry_module):
    exit_code, lines = run_main(entry_module, ["--min", "5", "--check", "4"])

    assert exit_code == 1
    payload = json.loads(lines[-1])
    assert payload == {
        "text": "4",
        "verdict": {"value": 4.0, "pristine": False, "valid": "invalid"},
    }


def test_check_with_explanation(entry_module):
    exit_code, lines = run_main(
        entry_module,
        ["--accept-float", "--min-decimals", "2", "--max-decimals", "4", "--check", "1.12345", "--explain"],
    )

    assert exit_code == 1
    payload = json.loads(lines[-1])
    assert [issue["field"] for issue in payload["issues"]] == ["max_decimals"]


def test_type_replays_each_key(entry_module):
    exit_code, lines = run_main(entry_module, ["--min", "0", "--type", "-12"])

    assert exit_code == 0
    decisions = [json.loads(line) for line in lines]
    assert [d["allowed"] for d in decisions[:3]] == [False, True, True]
    assert decisions[-1]["text"] == "12"
    assert decisions[-1]["verdict"]["valid"] == "valid"


def test_paste_denied_exit_code(entry_module):
    exit_code, lines = run_main(entry_module, ["--value", "12", "--paste", "e123e123"])

    assert exit_code == 1
    payload = json.loads(lines[-1])
    assert payload["allowed"] is False
    assert payload["text"] == "12"


def test_config_file_and_bad_settings(entry_module, tmp_path):
    settings = tmp_path / "field.json"
    settings.write_text(json.dumps({"min": -10, "max": 10}), encoding="utf-8")

    exit_code, _ = run_main(entry_module, ["--config", str(settings), "--check", "-7"])
    assert exit_code == 0

    exit_code, lines = run_main(entry_module, ["--min", "low", "--check", "1"])
    assert exit_code == 2
    assert any("Configuration error" in line for line in lines)
