import os

import pytest

pytest.importorskip("PySide6")
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
try:
    from PySide6.QtWidgets import QApplication
    from PySide6.QtGui import QValidator
    from PySide6.QtTest import QTest
except ImportError:  # pragma: no cover - executed only when Qt bindings incomplete
    pytest.skip("PySide6 QtWidgets bindings unavailable", allow_module_level=True)

from numeric_config import NumericInputConfig
from numeric_field import NumericLineEdit, ShapeValidator, describe_verdict
from numeric_input import ValidationType, Verdict


@pytest.fixture(scope="module")
def qt_app():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


def make_field(**config):
    field = NumericLineEdit(NumericInputConfig(**config))
    verdicts = []
    field.value_updated.connect(verdicts.append)
    return field, verdicts


def test_typing_digits_emits_verdicts(qt_app):
    field, verdicts = make_field(min_value=5)

    QTest.keyClicks(field, "12")

    assert field.text() == "12"
    assert verdicts[-1] == Verdict(value=12, pristine=False, valid=ValidationType.VALID)


def test_denied_keys_leave_text_untouched(qt_app):
    field, verdicts = make_field(min_value=0)
    denied = []
    field.intent_denied.connect(denied.append)

    QTest.keyClicks(field, "-4.x")

    assert field.text() == "4"
    assert denied == ["-", ".", "x"]
    assert len(verdicts) == 1


def test_float_mode_accepts_exponent(qt_app):
    field, verdicts = make_field(accept_float=True, max_value=1000)

    QTest.keyClicks(field, "1.5e+2")

    assert field.text() == "1.5e+2"
    assert verdicts[-1].value == pytest.approx(150.0)
    assert verdicts[-1].valid is ValidationType.VALID


def test_programmatic_text_is_validated(qt_app):
    field, verdicts = make_field(min_value=5)

    field.setText("4")
    assert verdicts[-1] == Verdict(value=4, pristine=False, valid=ValidationType.INVALID)

    field.setText("")
    assert verdicts[-1].pristine is True


def test_initial_value_is_validated(qt_app):
    field = NumericLineEdit(NumericInputConfig(value="20", max_value=15))
    assert field.text() == "20"
    assert field.verdict.valid is ValidationType.INVALID


def test_paste_is_gatekept(qt_app):
    field, _ = make_field(accept_float=True)
    field.setText("12")
    field.setCursorPosition(2)

    QApplication.clipboard().setText("e123e123")
    assert field.paste_from_clipboard() is False
    assert field.text() == "12"

    QApplication.clipboard().setText("34")
    assert field.paste_from_clipboard() is True
    assert field.text() == "1234"


def test_set_config_revalidates(qt_app):
    field, verdicts = make_field()
    field.setText("7")
    field.set_config(NumericInputConfig(max_value=5))
    assert verdicts[-1].valid is ValidationType.INVALID


def test_describe_verdict():
    assert describe_verdict(Verdict(None, True, ValidationType.VALID)) == "Empty"
    assert describe_verdict(Verdict(4.0, False, ValidationType.INVALID)) == "INVALID: 4"


@pytest.mark.parametrize("text", ["١٢", "１２", "e5"])
def test_shape_validator_blocks_non_numerals(qt_app, text):
    field, _ = make_field(accept_float=True)
    state, _, _ = ShapeValidator(field).validate(text, len(text))
    assert state == QValidator.State.Invalid


def test_exponent_key_needs_a_digit_first(qt_app):
    field, verdicts = make_field(accept_float=True, min_value=5)

    QTest.keyClicks(field, "e12")

    assert field.text() == "12"
    assert verdicts[-1] == Verdict(value=12, pristine=False, valid=ValidationType.VALID)
