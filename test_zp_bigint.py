import pytest

from zp_bigint import UINT64_MAX, BigInt, parse_bigint
from zp_errors import (DivisionByZero, ErrorKind, InvalidArgument, InvalidFormat, InvariantViolation,
                       Overflow, Result, ZpError)


def _trunc_divmod(x, y):
    q = abs(x) // abs(y)
    if (x < 0) != (y < 0):
        q = -q
    return q, x - q * y


def _signed_values(rng, n=60):
    out = [0, 1, -1, 9, -10, 99, 100]
    for _ in range(n):
        v = rng.randrange(10 ** rng.randint(1, 30))
        out.append(-v if rng.random() < 0.5 else v)
    return out


@pytest.mark.parametrize("text", [
    "0", "7", "-7", "10", "-100000",
    "1234567890123456789012345678901234567890",
    "-98765432109876543210987654321",
])
def test_round_trip(text):
    assert parse_bigint(text).value.to_decimal_string() == text
    assert str(BigInt(text)) == text


def test_leading_zeros_and_negative_zero():
    assert str(BigInt("000123")) == "123"
    assert str(BigInt("-000123")) == "-123"
    for text in ("-0", "-000", "0000"):
        z = BigInt(text)
        assert str(z) == "0"
        assert not z.negative
        assert z.digits == [0]


def test_digits_least_significant_first():
    x = BigInt("-1203")
    assert x.digits == [3, 0, 2, 1]
    assert x.negative


@pytest.mark.parametrize("text", ["", "-", "--1", "+5", " 5", "5 ", "12a", "1.0", "1e5", "٣"])
def test_invalid_format(text):
    with pytest.raises(InvalidFormat):
        BigInt(text)
    res = parse_bigint(text)
    assert not res.ok
    assert res.error is ErrorKind.INVALID_FORMAT
    assert res.value is None


def test_result_unwrap():
    assert parse_bigint("42").unwrap() == 42
    with pytest.raises(InvalidFormat):
        parse_bigint("4x2").unwrap()
    assert Result(5).ok


def test_from_int():
    assert str(BigInt(-9223372036854775808)) == "-9223372036854775808"
    assert str(BigInt(9223372036854775807)) == "9223372036854775807"
    with pytest.raises(TypeError):
        BigInt(1.5)


@pytest.mark.parametrize("value", [2 ** 63, -2 ** 63 - 1, 10 ** 40])
def test_int_outside_int64_overflows(value):
    with pytest.raises(Overflow):
        BigInt(value)
    with pytest.raises(Overflow):
        BigInt(1) + value
    assert str(BigInt(str(value))) == str(value)


def test_arithmetic_matches_int(rng):
    values = _signed_values(rng)
    for _ in range(300):
        x, y = rng.choice(values), rng.choice(values)
        bx, by = BigInt(str(x)), BigInt(str(y))
        assert int(bx + by) == x + y
        assert int(bx - by) == x - y
        assert int(bx * by) == x * y
        if y != 0:
            q, r = _trunc_divmod(x, y)
            assert int(bx / by) == q
            assert int(bx % by) == r
            assert (bx / by) * by + bx % by == bx


def test_division_truncates_toward_zero():
    assert BigInt(-7) / 2 == -3
    assert BigInt(-7) % 2 == -1
    assert BigInt(7) / -2 == -3
    assert BigInt(7) % -2 == 1
    assert divmod(BigInt(-1), BigInt(5)) == (0, -1)
    q, _ = divmod(BigInt(-1), BigInt(5))
    assert not q.negative


def test_results_are_normalized():
    z = BigInt(5) - 5
    assert str(z) == "0" and not z.negative
    z = BigInt(-5) + BigInt(5)
    assert not z.negative
    z = BigInt(-3) * 0
    assert not z.negative
    assert (BigInt("1000") - BigInt("999")).digits == [1]


def test_division_by_zero():
    with pytest.raises(DivisionByZero):
        BigInt(5) / 0
    with pytest.raises(ZeroDivisionError):
        BigInt(5) % BigInt("-0")
    res = BigInt(5).checked_divmod(0)
    assert res.error is ErrorKind.DIVISION_BY_ZERO
    assert BigInt(17).checked_divmod(5).value == (3, 2)


def test_mixed_int_operands():
    assert 3 + BigInt(4) == 7
    assert 10 - BigInt(3) == 7
    assert 7 * BigInt(-2) == -14
    assert 20 / BigInt(6) == 3
    assert 20 % BigInt(6) == 2
    with pytest.raises(TypeError):
        BigInt(1) + 1.5


def test_ordering(rng):
    values = _signed_values(rng, 40)
    ordered = sorted(BigInt(str(v)) for v in values)
    assert [int(v) for v in ordered] == sorted(values)
    assert BigInt(-5) < BigInt(-3) < BigInt(0) < BigInt(2) < BigInt(10)
    assert BigInt(-100) < BigInt(-99)
    assert BigInt(12) >= 12 and BigInt(12) <= 12


def test_equality_and_hash():
    assert BigInt("5") == BigInt(5) == 5
    assert BigInt(5) != BigInt(-5)
    assert len({BigInt(5), BigInt("005"), BigInt(-5)}) == 2
    assert BigInt(5) != "5"


def test_abs_and_neg():
    assert abs(BigInt(-12)) == 12
    assert -BigInt(12) == -12
    assert not (-BigInt(0)).negative


def test_operands_untouched():
    a, b = BigInt(1234), BigInt(-56)
    a + b, a - b, a * b, a / b, a % b, -a, abs(b)
    assert a == 1234 and b == -56


@pytest.mark.parametrize("p", [13, 101, 7919, 1000003])
def test_fermat(p, rng):
    for _ in range(5):
        a = rng.randrange(1, p)
        assert BigInt.modpow(a, p - 1, p) == 1


def test_modpow_matches_pow(rng):
    for _ in range(40):
        b = rng.randrange(-10 ** 12, 10 ** 12)
        e = rng.randrange(0, 10 ** 6)
        m = rng.randrange(1, 10 ** 9)
        assert int(BigInt.modpow(b, e, m)) == pow(b, e, m)


def test_modpow_edges():
    assert BigInt.modpow(5, 0, 7) == 1
    assert BigInt.modpow(5, 3, 1) == 0
    assert BigInt.modpow(-2, 3, 7) == 6
    with pytest.raises(InvalidArgument):
        BigInt.modpow(2, -1, 7)
    with pytest.raises(DivisionByZero):
        BigInt.modpow(2, 3, 0)


def test_random_bounds(rng):
    bound = BigInt("1000")
    for _ in range(500):
        v = BigInt.random(bound, rng)
        assert 0 <= v < bound
    assert BigInt.random(1, rng) == 0


def test_random_covers_every_value(rng):
    seen = {int(BigInt.random(10, rng)) for _ in range(2000)}
    assert seen == set(range(10))
    seen = {int(BigInt.random(13, rng)) for _ in range(3000)}
    assert seen == set(range(13))


def test_random_rejects_overshooting_digit(scripted_rng):
    # 9 > 1 aborts the first draw, then 0, 7 gives 7 < 13
    assert BigInt.random(13, scripted_rng([9, 0, 7])) == 7
    # drawing the bound itself is repeated
    assert BigInt.random(13, scripted_rng([1, 3, 1, 2])) == 12


@pytest.mark.parametrize("bound", [0, -5, "-1"])
def test_random_invalid_bound(bound, rng):
    with pytest.raises(InvalidArgument):
        BigInt.random(bound, rng)


def test_uint64_narrowing():
    assert BigInt(str(UINT64_MAX)).to_uint64() == UINT64_MAX
    assert BigInt(0).to_uint64() == 0
    with pytest.raises(Overflow):
        BigInt(str(UINT64_MAX + 1)).to_uint64()
    with pytest.raises(Overflow):
        BigInt(-1).to_uint64()
    assert BigInt.from_uint64(UINT64_MAX) == BigInt(str(UINT64_MAX))
    with pytest.raises(Overflow):
        BigInt.from_uint64(-1)


def test_error_kinds():
    assert ZpError.kind is None
    for cls in (InvalidFormat, DivisionByZero, InvalidArgument, Overflow, InvariantViolation):
        assert isinstance(cls.kind, ErrorKind)
        assert issubclass(cls, ZpError)
