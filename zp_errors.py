# zp_errors.py
# Error kinds shared by the decimal engine, the primality checker and the solver.
#
# Every failure is raised where it is detected as a ZpError subclass tagged with
# an ErrorKind. Call sites that prefer explicit branching wrap the call with
# capture() and inspect the returned Result instead.

import enum
from typing import Any, Callable, NamedTuple, Optional


class ErrorKind(enum.Enum):
    INVALID_FORMAT = "invalid_format"
    DIVISION_BY_ZERO = "division_by_zero"
    INVALID_ARGUMENT = "invalid_argument"
    OVERFLOW = "overflow"
    INVARIANT_VIOLATION = "invariant_violation"


class ZpError(Exception):
    kind: Optional[ErrorKind] = None


class InvalidFormat(ZpError, ValueError):
    """Malformed numeral text."""
    kind = ErrorKind.INVALID_FORMAT


class DivisionByZero(ZpError, ZeroDivisionError):
    kind = ErrorKind.DIVISION_BY_ZERO


class InvalidArgument(ZpError, ValueError):
    kind = ErrorKind.INVALID_ARGUMENT


class Overflow(ZpError, OverflowError):
    """Value does not fit the requested fixed-width integer."""
    kind = ErrorKind.OVERFLOW


class InvariantViolation(ZpError, ArithmeticError):
    """An impossible residue was observed, i.e. the modulus was not prime."""
    kind = ErrorKind.INVARIANT_VIOLATION


# ---------- explicit results ----------
class Result(NamedTuple):
    value: Any = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self):
        """Return the value, re-raising the recorded error kind on failure."""
        if self.error is not None:
            raise _BY_KIND[self.error](self.message)
        return self.value


_BY_KIND = {cls.kind: cls for cls in (InvalidFormat, DivisionByZero, InvalidArgument, Overflow, InvariantViolation)}


def capture(fn: Callable, *args, **kwargs) -> Result:
    """
    Run fn and fold any ZpError into a Result.

    :param fn: Callable raising ZpError subclasses on failure.
    :return: Result(value) on success, Result(error=kind, message=...) otherwise.
    """
    try:
        return Result(fn(*args, **kwargs))
    except ZpError as e:
        return Result(error=e.kind, message=str(e))
