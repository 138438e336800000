# zp_bigint.py
# Arbitrary-precision signed integers stored as decimal digits.
#
# A value is a sign flag plus a list of digits 0-9, least significant first.
# The list is never empty, carries no most-significant zeros (except the single
# digit of zero) and zero is never negative. Every operator returns a new value.
#
# Division is C-style: `/` truncates toward zero and `%` takes the sign of the
# dividend, so that (a / b) * b + a % b == a.

import logging
import random
from typing import List, Optional, Tuple, Union

from zp_errors import DivisionByZero, InvalidArgument, InvalidFormat, Overflow, Result, capture

log = logging.getLogger(__name__)

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MAX = (1 << 64) - 1

_DECIMAL = "0123456789"


# ---------- magnitude helpers (little-endian digit lists) ----------
def _trim(digits: List[int]) -> List[int]:
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
    if not digits:
        digits.append(0)
    return digits


def _int_digits(n: int) -> List[int]:
    digits = []
    while True:
        n, d = divmod(n, 10)
        digits.append(d)
        if n == 0:
            return digits


def _cmp_mag(a: List[int], b: List[int]) -> int:
    if len(a) != len(b):
        return -1 if len(a) < len(b) else 1
    for i in range(len(a) - 1, -1, -1):
        if a[i] != b[i]:
            return -1 if a[i] < b[i] else 1
    return 0


def _add_mag(a: List[int], b: List[int]) -> List[int]:
    out = []
    carry = 0
    for i in range(max(len(a), len(b))):
        s = carry
        if i < len(a):
            s += a[i]
        if i < len(b):
            s += b[i]
        out.append(s % 10)
        carry = s // 10
    if carry:
        out.append(carry)
    return out


def _sub_mag(a: List[int], b: List[int]) -> List[int]:
    """|a| - |b|, requires |a| >= |b|."""
    out = []
    borrow = 0
    for i in range(len(a)):
        diff = a[i] - borrow
        if i < len(b):
            diff -= b[i]
        if diff < 0:
            diff += 10
            borrow = 1
        else:
            borrow = 0
        out.append(diff)
    return _trim(out)


def _mul_mag(a: List[int], b: List[int]) -> List[int]:
    acc = [0] * (len(a) + len(b))
    for i, x in enumerate(a):
        if x == 0:
            continue
        carry = 0
        for j, y in enumerate(b):
            cur = acc[i + j] + x * y + carry
            acc[i + j] = cur % 10
            carry = cur // 10
        k = i + len(b)
        while carry:
            cur = acc[k] + carry
            acc[k] = cur % 10
            carry = cur // 10
            k += 1
    return _trim(acc)


def _divmod_mag(a: List[int], b: List[int]) -> Tuple[List[int], List[int]]:
    """
    Schoolbook long division of magnitudes.
    Walks the dividend from its most significant digit, shifting each digit into
    a running remainder and subtracting the divisor as often as it fits (at most 9).
    """
    quotient = []
    rem = [0]
    for d in reversed(a):
        if len(rem) == 1 and rem[0] == 0:
            rem = [d]
        else:
            rem.insert(0, d)
        q = 0
        while _cmp_mag(rem, b) >= 0:
            rem = _sub_mag(rem, b)
            q += 1
        quotient.append(q)
    quotient.reverse()
    return _trim(quotient), rem


def _parse_decimal(text: str) -> Tuple[bool, List[int]]:
    negative = text.startswith("-")
    body = text[1:] if negative else text
    if not body:
        raise InvalidFormat(f"no digits in {text!r}")
    digits = []
    for ch in reversed(body):
        if ch not in _DECIMAL:
            raise InvalidFormat(f"invalid character {ch!r} in {text!r}")
        digits.append(ord(ch) - ord("0"))
    return negative, _trim(digits)


# ---------- BigInt ----------
class BigInt:
    """
    Signed decimal big integer.

    Built from a signed 64-bit Python int, a decimal string ('-' optional, ASCII
    digits only) or another BigInt. Plain ints are accepted on either side of
    every operator and go through the same 64-bit check; wider values must
    come in as text.
    """

    __slots__ = ("digits", "negative")

    def __init__(self, value: Union[int, str, "BigInt"] = 0):
        if isinstance(value, BigInt):
            negative, digits = value.negative, list(value.digits)
        elif isinstance(value, str):
            negative, digits = _parse_decimal(value)
        elif isinstance(value, int):
            if not INT64_MIN <= value <= INT64_MAX:
                raise Overflow(f"{value} does not fit a signed 64-bit integer")
            negative, digits = value < 0, _int_digits(-value if value < 0 else value)
        else:
            raise TypeError(f"cannot build BigInt from {type(value).__name__}")
        self.digits = digits
        self.negative = negative and not (len(digits) == 1 and digits[0] == 0)

    @classmethod
    def _make(cls, digits: List[int], negative: bool) -> "BigInt":
        obj = cls.__new__(cls)
        obj.digits = _trim(digits)
        obj.negative = negative and not (len(obj.digits) == 1 and obj.digits[0] == 0)
        return obj

    @classmethod
    def from_uint64(cls, value: int) -> "BigInt":
        if not 0 <= value <= UINT64_MAX:
            raise Overflow(f"{value} is not an unsigned 64-bit value")
        return cls._make(_int_digits(value), False)

    # ---------- predicates ----------
    def is_zero(self) -> bool:
        return len(self.digits) == 1 and self.digits[0] == 0

    def is_odd(self) -> bool:
        return self.digits[0] % 2 == 1

    def __bool__(self):
        return not self.is_zero()

    # ---------- sign ----------
    def __neg__(self):
        return BigInt._make(list(self.digits), not self.negative)

    def __abs__(self):
        return BigInt._make(list(self.digits), False)

    # ---------- arithmetic ----------
    def __add__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        if self.negative != other.negative:
            if self.negative:
                return other - (-self)
            return self - (-other)
        return BigInt._make(_add_mag(self.digits, other.digits), self.negative)

    __radd__ = __add__

    def __sub__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        if self.negative != other.negative:
            return self + (-other)
        if _cmp_mag(self.digits, other.digits) < 0:
            return -(other - self)
        return BigInt._make(_sub_mag(self.digits, other.digits), self.negative)

    def __rsub__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return other - self

    def __mul__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return BigInt._make(_mul_mag(self.digits, other.digits), self.negative != other.negative)

    __rmul__ = __mul__

    def __divmod__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        if other.is_zero():
            raise DivisionByZero(f"division of {self} by zero")
        q, r = _divmod_mag(self.digits, other.digits)
        quotient = BigInt._make(q, self.negative != other.negative)
        # same value as self - quotient * other
        remainder = BigInt._make(r, self.negative)
        return quotient, remainder

    def __rdivmod__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return divmod(other, self)

    def __truediv__(self, other):
        res = self.__divmod__(other)
        return res if res is NotImplemented else res[0]

    def __rtruediv__(self, other):
        res = self.__rdivmod__(other)
        return res if res is NotImplemented else res[0]

    def __mod__(self, other):
        res = self.__divmod__(other)
        return res if res is NotImplemented else res[1]

    def __rmod__(self, other):
        res = self.__rdivmod__(other)
        return res if res is NotImplemented else res[1]

    def checked_divmod(self, other) -> Result:
        """divmod() that reports a zero divisor as Result(error=DIVISION_BY_ZERO)."""
        return capture(divmod, self, other)

    # ---------- comparison ----------
    def _compare(self, other: "BigInt") -> int:
        if self.negative != other.negative:
            return -1 if self.negative else 1
        c = _cmp_mag(self.digits, other.digits)
        return -c if self.negative else c

    def __eq__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.negative == other.negative and self.digits == other.digits

    def __lt__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) < 0

    def __le__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) <= 0

    def __gt__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) > 0

    def __ge__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) >= 0

    def __hash__(self):
        return hash(int(self))

    # ---------- conversion ----------
    def __int__(self):
        n = 0
        for d in reversed(self.digits):
            n = n * 10 + d
        return -n if self.negative else n

    def to_uint64(self) -> int:
        """Narrow to an unsigned 64-bit value, raising Overflow when it does not fit."""
        if self.negative or self > BigInt.from_uint64(UINT64_MAX):
            raise Overflow(f"{self} does not fit an unsigned 64-bit integer")
        return int(self)

    def to_decimal_string(self) -> str:
        text = "".join(_DECIMAL[d] for d in reversed(self.digits))
        return "-" + text if self.negative else text

    __str__ = to_decimal_string

    def __repr__(self):
        return f"BigInt('{self.to_decimal_string()}')"

    # ---------- number theory ----------
    @staticmethod
    def modpow(base, exponent, mod) -> "BigInt":
        """
        base^exponent mod |mod| by square-and-multiply.

        The base is reduced into [0, |mod|) first, so the result always lies there.

        :param base: Any integer.
        :param exponent: Non-negative exponent.
        :param mod: Nonzero modulus.
        :return: BigInt in [0, |mod|).
        """
        base, exponent, mod = BigInt(base), BigInt(exponent), abs(BigInt(mod))
        if exponent.negative:
            raise InvalidArgument(f"negative exponent {exponent}")
        if mod.is_zero():
            raise DivisionByZero("modpow with zero modulus")
        result = BigInt(1) % mod
        base = base % mod
        if base.negative:
            base = base + mod
        while exponent:
            if exponent.is_odd():
                result = (result * base) % mod
            exponent = exponent / 2
            base = (base * base) % mod
        return result

    @staticmethod
    def random(bound, rng=None) -> "BigInt":
        """
        Uniform sample in [0, bound).

        Digits are drawn most significant first. While the prefix still equals the
        bound's prefix a digit above the bound's digit aborts the draw, and a draw
        that reproduces the bound itself is repeated, which keeps the result uniform.

        :param bound: Strictly positive upper bound (exclusive).
        :param rng: Object with randint(a, b), e.g. random.Random. A fresh
                    random.Random() is used when omitted.
        """
        bound = BigInt(bound)
        if bound.negative or bound.is_zero():
            raise InvalidArgument(f"random bound must be positive, got {bound}")
        if rng is None:
            rng = random.Random()
        top = bound.digits[::-1]
        while True:
            chosen = []
            below = False
            for limit in top:
                d = rng.randint(0, 9)
                if not below:
                    if d > limit:
                        break
                    below = d < limit
                chosen.append(d)
            else:
                if below:
                    chosen.reverse()
                    return BigInt._make(chosen, False)


def _coerce(value) -> Optional[BigInt]:
    if isinstance(value, BigInt):
        return value
    if isinstance(value, int):
        return BigInt(value)
    return None


def parse_bigint(text: str) -> Result:
    """
    Parse decimal text into a BigInt without raising.

    :param text: Optional '-' followed by one or more ASCII digits.
    :return: Result(BigInt) or Result(error=ErrorKind.INVALID_FORMAT, ...).
    """
    res = capture(BigInt, text)
    if not res.ok:
        log.debug("rejected numeral %r: %s", text, res.message)
    return res
