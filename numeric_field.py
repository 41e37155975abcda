"""
Qt host for the numeric input engine.
NumericLineEdit forwards keystrokes, pastes and text changes from a
QLineEdit to the engine and publishes each verdict through a signal.
"""
import sys
from typing import Optional, Tuple

from PySide6.QtWidgets import QApplication, QLabel, QLineEdit, QVBoxLayout, QWidget
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QKeySequence, QValidator

from logger import LoggableMixin, LogCategory
from numeric_config import NumericInputConfig, review_configuration
from numeric_input import (
    Verdict, is_plausible, on_key_intent, on_paste_intent, on_value_changed,
)


class ShapeValidator(QValidator):
    """Rejects edits that bypass the key handler (context menu paste, drops)."""

    def __init__(self, field: "NumericLineEdit"):
        super().__init__(field)
        self._field = field

    def validate(self, text: str, pos: int):
        if is_plausible(text, self._field.config):
            return QValidator.State.Acceptable, text, pos
        return QValidator.State.Invalid, text, pos


class NumericLineEdit(QLineEdit, LoggableMixin):
    """Line edit whose content is gatekept and validated by the engine."""

    # Signals
    value_updated = Signal(object)
    intent_denied = Signal(str)

    def __init__(self, config: Optional[NumericInputConfig] = None, parent=None):
        QLineEdit.__init__(self, parent)
        LoggableMixin.__init__(self)
        self.config = config or NumericInputConfig()
        self._report_configuration()
        self.setValidator(ShapeValidator(self))
        self.verdict: Verdict = on_value_changed("", self.config)
        self.textChanged.connect(self._on_text_changed)
        if self.config.value:
            self.setText(self.config.value)
        self.log_debug("Numeric line edit initialized", category=LogCategory.HOST)

    def _report_configuration(self):
        for issue in review_configuration(self.config):
            self.log_warning(f"{issue.title}: {issue.message}", field=issue.field)

    def set_config(self, config: NumericInputConfig):
        """Swap the constraints and re-validate the current text."""
        self.config = config
        self._report_configuration()
        self._on_text_changed(self.text())

    def current_selection(self) -> Tuple[int, int]:
        """Range of the text the next insertion replaces."""
        if self.hasSelectedText():
            start = self.selectionStart()
            return start, start + len(self.selectedText())
        position = self.cursorPosition()
        return position, position

    def keyPressEvent(self, event):
        """Run printable keystrokes through the gatekeeper."""
        if event.matches(QKeySequence.StandardKey.Paste):
            self.paste_from_clipboard()
            event.accept()
            return
        key_text = event.text()
        modifiers = event.modifiers() & (
            Qt.KeyboardModifier.ControlModifier
            | Qt.KeyboardModifier.AltModifier
            | Qt.KeyboardModifier.MetaModifier
        )
        if len(key_text) == 1 and key_text.isprintable() and not modifiers:
            allowed = on_key_intent(key_text, self.text(), self.config, self.current_selection())
            self._logger.log_intent("key", allowed, key=key_text, text=self.text())
            if not allowed:
                # Swallow the event so no default insertion happens
                event.accept()
                self.intent_denied.emit(key_text)
                return
        super().keyPressEvent(event)

    def paste_from_clipboard(self) -> bool:
        """Paste the clipboard text if the gatekeeper allows it."""
        clipboard_text = QApplication.clipboard().text()
        allowed = on_paste_intent(clipboard_text, self.text(), self.config, self.current_selection())
        self._logger.log_intent("paste", allowed, clipboard=clipboard_text, text=self.text())
        if not allowed:
            self.intent_denied.emit(clipboard_text)
            self.log_user_action("paste_denied", {"clipboard": clipboard_text})
            return False
        if clipboard_text:
            self.insert(clipboard_text)
        return True

    def _on_text_changed(self, text: str):
        self.verdict = on_value_changed(text, self.config)
        self._logger.log_verdict(text, self.verdict)
        self.value_updated.emit(self.verdict)


def describe_verdict(verdict: Verdict) -> str:
    """Short status line for a verdict."""
    if verdict.pristine:
        return "Empty"
    if verdict.value is None:
        return verdict.valid.value.upper()
    return f"{verdict.valid.value.upper()}: {verdict.value:g}"


def run_demo(config: NumericInputConfig) -> int:
    """Show a window with one numeric field and its live verdict."""
    app = QApplication.instance() or QApplication(sys.argv)
    window = QWidget()
    window.setWindowTitle("Numeric Input")
    layout = QVBoxLayout(window)
    field = NumericLineEdit(config, window)
    status = QLabel(describe_verdict(field.verdict), window)
    field.value_updated.connect(lambda verdict: status.setText(describe_verdict(verdict)))
    field.intent_denied.connect(lambda text: status.setText(f"Rejected input: {text!r}"))
    layout.addWidget(field)
    layout.addWidget(status)
    window.show()
    return app.exec()
