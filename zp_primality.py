# zp_primality.py
# Decide whether a candidate modulus is usable by the square-root solver:
# an odd prime strictly greater than 2.
#
# Small candidates go through deterministic trial division, larger ones through
# Miller-Rabin with randomly drawn bases.

import logging
import random
from typing import Optional

from zp_bigint import BigInt

log = logging.getLogger(__name__)

TRIAL_DIVISION_LIMIT = 1000
MR_ROUNDS = 10

ONE = BigInt(1)
TWO = BigInt(2)


def trial_division(n: BigInt) -> bool:
    """
    Deterministic check of odd n > 2: no odd divisor in [3, n/2].
    """
    n = BigInt(n)
    i = BigInt(3)
    limit = n / TWO
    while i <= limit:
        if (n % i).is_zero():
            log.debug("trial division: %s divides %s", i, n)
            return False
        i = i + TWO
    return True


def _mr_witness(a: BigInt, n: BigInt, d: BigInt, s: int) -> bool:
    """
    Check if a is a Miller-Rabin witness for composite n.
    """
    n_minus_1 = n - ONE
    x = BigInt.modpow(a, d, n)
    if x == ONE or x == n_minus_1:
        return False
    for _ in range(1, s):
        x = (x * x) % n
        if x == n_minus_1:
            return False
        if x == ONE:
            # nontrivial square root of unity
            return True
    return True  # composite


def miller_rabin(n: BigInt, rounds: int = MR_ROUNDS, rng: Optional[random.Random] = None) -> bool:
    """
    Probabilistic primality test using Miller-Rabin.

    :param n: Odd number > 3 to test.
    :param rounds: Number of independent bases (error <= 4^-rounds).
    :param rng: Source for the bases; a fresh random.Random() when omitted.
    :return: True if probable prime.
    """
    n = BigInt(n)
    if rng is None:
        rng = random.Random()
    d = n - ONE
    s = 0
    while not d.is_odd():
        d = d / TWO
        s += 1
    for r in range(rounds):
        a = BigInt.random(n - TWO, rng) + ONE
        if _mr_witness(a, n, d, s):
            log.debug("miller-rabin: base %s witnesses %s composite (round %d)", a, n, r + 1)
            return False
    log.debug("miller-rabin: %s passed %d rounds", n, rounds)
    return True


def is_acceptable_modulus(p: BigInt, rng: Optional[random.Random] = None, rounds: int = MR_ROUNDS,
                          trial_limit: int = TRIAL_DIVISION_LIMIT) -> bool:
    """
    True iff p is an odd prime strictly greater than 2.

    :param p: Candidate modulus.
    :param rng: Random source for Miller-Rabin bases.
    :param rounds: Miller-Rabin rounds used at or above trial_limit.
    :param trial_limit: Below this value trial division decides.
    """
    p = BigInt(p)
    if p <= TWO or not p.is_odd():
        return False
    if p < BigInt(trial_limit):
        return trial_division(p)
    return miller_rabin(p, rounds, rng)
