"""Error taxonomy for calculator inputs and the explanation service.

Input problems are ``ValueError`` subclasses so callers that only care about
"bad input" can catch the builtin. Each error names the field it concerns.
When the validator collects several problems, the one it raises carries all of
them in ``errors``; ``summary()`` joins their messages for display.
"""

from typing import Any, Iterable, Optional, Tuple


class InputError(ValueError):
    """Base class for user-correctable input problems."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
        self.errors: Tuple["InputError", ...] = (self,)

    def summary(self) -> str:
        return "; ".join(str(e) for e in self.errors)


class MissingInputError(InputError):
    def __init__(self, field: str, label: Optional[str] = None):
        super().__init__(f"Missing input: {label or field}", field)


class InvalidNumberError(InputError):
    def __init__(self, field: str, raw: Any, label: Optional[str] = None, reason: str = "not a valid number"):
        self.raw = raw
        super().__init__(f"Invalid number in {label or field}: {raw!r} is {reason}", field)


class RangeError(InputError):
    """A parsed value violates a physical-plausibility bound.

    ``bound`` is the violated condition as text, e.g. ``"<= 1"`` or ``"> 0"``.
    """

    def __init__(self, field: str, bound: str, value: Any, label: Optional[str] = None):
        self.bound = bound
        self.value = value
        super().__init__(f"{label or field} must be {bound} (got {value})", field)


class CrossFieldError(InputError):
    """Individually valid fields that are inconsistent with each other."""

    def __init__(self, message: str, fields: Iterable[str] = ()):
        self.fields = tuple(fields)
        super().__init__(message, self.fields[0] if self.fields else None)


class ExplanationUnavailable(RuntimeError):
    """The explanation service failed or timed out; the numeric result stands."""
