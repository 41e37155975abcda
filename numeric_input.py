"""
Numeric Input engine.

Two pure checks share one :class:`~numeric_config.NumericInputConfig`:

* the gatekeeper (:func:`on_key_intent`, :func:`on_paste_intent`) decides
  whether a prospective edit may happen, looking only at the shape of the
  resulting text;
* the validator (:func:`on_value_changed`) parses the full text after an
  accepted edit and returns a :class:`Verdict`.

Neither raises for any input text. :class:`NumericInputSession` wires both
together for hosts that want the edit/notify loop handled for them.
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from logger import LoggableMixin
from numeric_config import NumericInputConfig, ValidationIssue, review_configuration


class ValidationType(Enum):
    """Outcome of validating a non-empty field text."""

    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class Verdict:
    """Result of validating the full text of a field."""

    value: Optional[float]
    pristine: bool
    valid: ValidationType

    @property
    def is_valid(self) -> bool:
        return self.valid is ValidationType.VALID

    def to_dict(self) -> dict:
        """Plain representation forwarded to application code."""
        return {"value": self.value, "pristine": self.pristine, "valid": self.valid.value}


PRISTINE = Verdict(value=None, pristine=True, valid=ValidationType.VALID)

Selection = Tuple[int, int]
VerdictListener = Callable[[Verdict], None]

# Text that may still become a number while the user keeps typing: a sign or
# point with no digit yet, or a mantissa with at least one digit.
_PARTIAL_INTEGER = re.compile(r"-?[0-9]*")
_PARTIAL_FLOAT = re.compile(r"-?\.?|-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]*)?")
# Complete numerals, required of pasted text.
_COMPLETE_INTEGER = re.compile(r"-?[0-9]+")
_COMPLETE_FLOAT = re.compile(r"-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
# Longest numeric prefix, matched from the start of the text.
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
# Any shape the validator will parse; programmatic sets may carry a '+' sign.
_NUMERIC_SHAPE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]*)?")
# Typing has started but no mantissa digit has been entered yet.
_NO_DIGIT_YET = re.compile(r"-?\.?")
_DECIMALS = re.compile(r"\.([0-9]*)")

_EXPONENT_MARKERS = "eE"


def _split(text: str, selection: Optional[Selection]) -> Tuple[str, str]:
    """Return the text before and after the range an insertion replaces."""
    if selection is None:
        return text, ""
    start, end = sorted(selection)
    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))
    return text[:start], text[end:]


def is_plausible(text: str, config: NumericInputConfig) -> bool:
    """Whether ``text`` is a numeral, or the beginning of one, for ``config``.

    The empty string is always plausible. A leading ``-`` is rejected when the
    bounds make every valid value non-negative.
    """
    if text == "":
        return True
    grammar = _PARTIAL_FLOAT if config.accept_float else _PARTIAL_INTEGER
    if grammar.fullmatch(text) is None:
        return False
    return not (text.startswith("-") and not config.allows_negative)


def on_key_intent(
    key: str,
    current_text: str,
    config: NumericInputConfig,
    selection: Optional[Selection] = None,
) -> bool:
    """Decide whether typing ``key`` into ``current_text`` may proceed.

    ``selection`` is the ``(start, end)`` range the key replaces; without one
    the key is appended. Returns ``True`` to allow and ``False`` to deny.
    """
    if len(key) != 1:
        return False
    before, after = _split(current_text, selection)
    remaining = before + after

    if key in string.digits:
        return True

    exponent_sign_slot = (
        config.accept_float
        and before[-1:] in ("e", "E")
        and after[:1] not in ("+", "-")
    )

    if key == "-":
        if exponent_sign_slot:
            allowed = True
        elif not config.allows_negative:
            return False
        else:
            allowed = before == "" and not after.startswith("-")
    elif key == ".":
        allowed = (
            config.accept_float
            and "." not in remaining
            and not any(marker in before for marker in _EXPONENT_MARKERS)
        )
    elif key in _EXPONENT_MARKERS:
        # The exponent needs a mantissa digit in front of it
        allowed = (
            config.accept_float
            and not any(marker in remaining for marker in _EXPONENT_MARKERS)
            and any(ch in string.digits for ch in before)
        )
    elif key == "+":
        allowed = exponent_sign_slot
    else:
        return False

    return allowed and is_plausible(before + key + after, config)


def on_paste_intent(
    clipboard_text: str,
    current_text: str,
    config: NumericInputConfig,
    selection: Optional[Selection] = None,
) -> bool:
    """Decide whether pasting ``clipboard_text`` may proceed.

    The clipboard text must be a complete numeral on its own and the text
    after the paste must still be plausible. Any failure denies the paste as a
    whole.
    """
    if clipboard_text == "":
        return True
    grammar = _COMPLETE_FLOAT if config.accept_float else _COMPLETE_INTEGER
    if grammar.fullmatch(clipboard_text) is None:
        return False
    if clipboard_text.startswith("-") and not config.allows_negative:
        return False
    before, after = _split(current_text, selection)
    return is_plausible(before + clipboard_text + after, config)


def decimal_count(text: str) -> int:
    """Number of digits after the decimal point, up to any exponent marker."""
    match = _DECIMALS.search(text)
    return len(match.group(1)) if match else 0


def _parse_prefix(text: str) -> Optional[float]:
    match = _NUMERIC_PREFIX.match(text)
    if match is None:
        return None
    return float(match.group(0))


def _evaluate(text: str, config: NumericInputConfig) -> Tuple[Optional[float], bool, List[ValidationIssue]]:
    """Parse ``text`` and collect every constraint it fails."""
    if text == "":
        return None, True, []

    value = _parse_prefix(text)
    well_shaped = _NUMERIC_SHAPE.fullmatch(text) is not None
    if value is None:
        if _NO_DIGIT_YET.fullmatch(text):
            return None, True, []
        return None, False, [
            ValidationIssue(
                field="value",
                title="Not a Number",
                message=f"{text!r} does not start with a number.",
            )
        ]

    issues: List[ValidationIssue] = []
    if not well_shaped:
        issues.append(
            ValidationIssue(
                field="value",
                title="Malformed Number",
                message=f"{text!r} contains characters that are not part of a number.",
            )
        )

    if config.min_value is not None and value < config.min_value:
        issues.append(
            ValidationIssue(
                field="min",
                title="Below Minimum",
                message=f"Enter a value of at least {config.min_value:g}.",
            )
        )
    if config.max_value is not None and value > config.max_value:
        issues.append(
            ValidationIssue(
                field="max",
                title="Above Maximum",
                message=f"Enter a value of at most {config.max_value:g}.",
            )
        )

    decimals = decimal_count(text)
    if config.accept_float:
        if decimals < config.min_decimals:
            issues.append(
                ValidationIssue(
                    field="min_decimals",
                    title="Too Few Decimals",
                    message=f"Use at least {config.min_decimals} digits after the decimal point.",
                )
            )
        if config.max_decimals is not None and decimals > config.max_decimals:
            issues.append(
                ValidationIssue(
                    field="max_decimals",
                    title="Too Many Decimals",
                    message=f"Use at most {config.max_decimals} digits after the decimal point.",
                )
            )
    elif "." in text or any(marker in text for marker in _EXPONENT_MARKERS):
        issues.append(
            ValidationIssue(
                field="accept_float",
                title="Whole Number Required",
                message="Only whole numbers are accepted; remove the decimal point or exponent.",
            )
        )

    return value, False, issues


def on_value_changed(new_text: str, config: NumericInputConfig) -> Verdict:
    """Validate the full field text and return its verdict."""
    value, pristine, issues = _evaluate(new_text, config)
    if pristine:
        return PRISTINE
    valid = ValidationType.INVALID if issues else ValidationType.VALID
    return Verdict(value=value, pristine=False, valid=valid)


def explain(new_text: str, config: NumericInputConfig) -> List[ValidationIssue]:
    """List every constraint ``new_text`` fails; empty when the text is valid."""
    return _evaluate(new_text, config)[2]


class NumericInputSession(LoggableMixin):
    """Holds the text of one field and runs the engine on each edit.

    Accepted edits update :attr:`text` and notify every listener with the new
    verdict. Denied intents leave the text alone and notify nobody.
    """

    def __init__(
        self,
        config: NumericInputConfig,
        text: Optional[str] = None,
        on_value_update: Optional[VerdictListener] = None,
    ):
        LoggableMixin.__init__(self)
        self.config = config
        self.text = config.value if text is None else text
        self._listeners: List[VerdictListener] = []
        if on_value_update is not None:
            self._listeners.append(on_value_update)
        for issue in review_configuration(config):
            self.log_warning(f"{issue.title}: {issue.message}", field=issue.field)
        self.verdict = on_value_changed(self.text, config)

    def subscribe(self, listener: VerdictListener) -> VerdictListener:
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: VerdictListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _apply(self, insertion: str, selection: Optional[Selection]) -> Verdict:
        before, after = _split(self.text, selection)
        return self.set_text(before + insertion + after)

    def key(self, key: str, selection: Optional[Selection] = None) -> bool:
        """Type one key; returns whether it was allowed."""
        allowed = on_key_intent(key, self.text, self.config, selection)
        self._logger.log_intent("key", allowed, key=key, text=self.text)
        if allowed:
            self._apply(key, selection)
        return allowed

    def paste(self, clipboard_text: str, selection: Optional[Selection] = None) -> bool:
        """Paste ``clipboard_text``; returns whether it was allowed."""
        allowed = on_paste_intent(clipboard_text, self.text, self.config, selection)
        self._logger.log_intent("paste", allowed, clipboard=clipboard_text, text=self.text)
        if not allowed:
            self.log_user_action("paste_denied", {"clipboard": clipboard_text})
        elif clipboard_text:
            self._apply(clipboard_text, selection)
        return allowed

    def type_text(self, text: str) -> List[bool]:
        """Type ``text`` one key at a time, returning each key's decision."""
        return [self.key(key) for key in text]

    def set_text(self, text: str) -> Verdict:
        """Replace the text without gatekeeping and validate the result."""
        self.text = text
        self.verdict = on_value_changed(text, self.config)
        self._logger.log_verdict(text, self.verdict)
        for listener in list(self._listeners):
            listener(self.verdict)
        return self.verdict
