# zp_cipolla.py
# Square roots modulo an odd prime with Cipolla's algorithm.
#
# For a quadratic residue a mod p, pick t with w = t^2 - a a non-residue.
# In the ring GF(p)[sqrt(w)] the element (t + sqrt(w))^((p+1)/2) has zero
# imaginary part and its real part squares to a.
#
# The caller guarantees p is prime (see zp_primality.is_acceptable_modulus).

import logging
import random
from typing import Iterator, List, NamedTuple, Optional

from zp_bigint import BigInt
from zp_errors import InvariantViolation

log = logging.getLogger(__name__)

# t = 1..DETERMINISTIC_CANDIDATES are tried first, then RANDOM_ATTEMPTS random t.
DETERMINISTIC_CANDIDATES = 10
RANDOM_ATTEMPTS = 100

ZERO = BigInt(0)
ONE = BigInt(1)
TWO = BigInt(2)


# ---------- symbols ----------
def legendre_symbol(a: BigInt, p: BigInt) -> int:
    """
    Compute the Legendre symbol (a/p) by Euler's criterion.

    :param a: Numerator.
    :param p: Odd prime denominator.
    :return: 1 if quadratic residue, -1 if not, 0 if a ≡ 0 mod p.
    """
    p = BigInt(p)
    t = BigInt.modpow(a, (p - ONE) / TWO, p)
    if t.is_zero():
        return 0
    if t == ONE:
        return 1
    if t == p - ONE:
        return -1
    raise InvariantViolation(f"Euler's criterion gave {t} for a={a}, p={p}; p is not prime")


# ---------- GF(p)[sqrt(w)] ----------
class ExtElement(NamedTuple):
    """real + imag*sqrt(omega), both components reduced mod p."""
    real: BigInt
    imag: BigInt


def ext_mul(x: ExtElement, y: ExtElement, omega: BigInt, p: BigInt) -> ExtElement:
    real = (x.real * y.real + x.imag * y.imag * omega) % p
    imag = (x.real * y.imag + x.imag * y.real) % p
    return ExtElement(real, imag)


def ext_square(x: ExtElement, omega: BigInt, p: BigInt) -> ExtElement:
    real = (x.real * x.real + x.imag * x.imag * omega) % p
    imag = (TWO * x.real * x.imag) % p
    return ExtElement(real, imag)


def ext_pow(t: BigInt, omega: BigInt, exponent: BigInt, p: BigInt) -> ExtElement:
    """
    (t + sqrt(omega))^exponent in GF(p)[sqrt(omega)] by square-and-multiply.
    """
    result = ExtElement(ONE, ZERO)
    base = ExtElement(BigInt(t) % p, ONE)
    exponent = BigInt(exponent)
    while exponent:
        if exponent.is_odd():
            result = ext_mul(result, base, omega, p)
        base = ext_square(base, omega, p)
        exponent = exponent / TWO
    return result


# ---------- solver ----------
def _reduce(x: BigInt, p: BigInt) -> BigInt:
    """x mod p normalized into [0, p)."""
    r = x % p
    if r.negative:
        r = r + p
    return r


def _candidates(p: BigInt, rng: random.Random, deterministic: int, attempts: int) -> Iterator[BigInt]:
    for t in range(1, deterministic + 1):
        yield BigInt(t)
    for _ in range(attempts):
        yield BigInt.random(p, rng)


def _roots_for(t: BigInt, omega: BigInt, a: BigInt, p: BigInt) -> List[BigInt]:
    x = ext_pow(t, omega, (p + ONE) / TWO, p).real
    x1 = (x + p) % p
    x2 = (p - x1) % p
    roots = []
    if (x1 * x1) % p == a:
        roots.append(x1)
    if x2 != x1 and (x2 * x2) % p == a:
        roots.append(x2)
    return roots


def solve_square_root(a: BigInt, p: BigInt, rng: Optional[random.Random] = None,
                      deterministic_candidates: int = DETERMINISTIC_CANDIDATES,
                      random_attempts: int = RANDOM_ATTEMPTS) -> List[BigInt]:
    """
    All x in [0, p) with x^2 ≡ a (mod p).

    :param a: Any integer; reduced into [0, p) first.
    :param p: Prime modulus > 2.
    :param rng: Source for the random t candidates; a fresh random.Random() when omitted.
    :param deterministic_candidates: How many of t = 1, 2, ... to try first.
    :param random_attempts: How many uniformly random t in [0, p) to try afterwards.
    :return: [0], two roots, or [] when a is a non-residue or the search is exhausted.
    """
    a, p = BigInt(a), BigInt(p)
    if p <= TWO:
        return []
    a = _reduce(a, p)
    if a.is_zero():
        return [BigInt(0)]
    if legendre_symbol(a, p) != 1:
        log.debug("%s is a non-residue mod %s", a, p)
        return []
    if rng is None:
        rng = random.Random()

    tried = 0
    for t in _candidates(p, rng, deterministic_candidates, random_attempts):
        tried += 1
        omega = _reduce(t * t - a, p)
        if omega.is_zero() or legendre_symbol(omega, p) != -1:
            continue
        roots = _roots_for(t, omega, a, p)
        if roots:
            log.debug("t=%s, omega=%s gave roots %s after %d candidates", t, omega, roots, tried)
            return roots
    log.info("no usable t for a=%s mod %s after %d candidates", a, p, tried)
    return []
