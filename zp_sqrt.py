#!/usr/bin/env python3
# zp_sqrt.py
# Square roots in Z_p: solve x^2 ≡ a (mod p) for an odd prime p on a decimal big-integer engine.
# Modes:
#   solve    -> parse a and p, require p odd prime > 2, run Cipolla and list the roots
#               Example: python zp_sqrt.py solve --a 10 --p 13
#               Example: python zp_sqrt.py --seed 7 solve --a 4 --p 1000003 --text
#   check    -> is p usable as a modulus (odd prime > 2; trial division below 1000, Miller-Rabin above)
#               Example: python zp_sqrt.py check --p 7919
#   legendre -> Legendre symbol (a/p) by Euler's criterion
#               Example: python zp_sqrt.py legendre --a 10 --p 13
#   modpow   -> base^exp mod m
#               Example: python zp_sqrt.py modpow --base 3 --exp 12 --mod 13
#   sample   -> uniform samples in [0, max)
#               Example: python zp_sqrt.py --seed 1 sample --max 1000 --count 5
#   selftest -> worked examples plus a cross-check against sympy
#               Example: python zp_sqrt.py selftest
#
# All numbers travel as decimal strings, both on the command line and in the JSON output.
#
# Python 3.8+

import argparse
import hashlib
import json
import logging
import random
import sys
import time as _t
from typing import Dict, List, Optional

from sympy import isprime
from sympy.ntheory import sqrt_mod

from zp_bigint import BigInt, parse_bigint
from zp_cipolla import DETERMINISTIC_CANDIDATES, RANDOM_ATTEMPTS, legendre_symbol, solve_square_root
from zp_errors import ZpError
from zp_primality import MR_ROUNDS, TRIAL_DIVISION_LIMIT, is_acceptable_modulus

log = logging.getLogger("zp_sqrt")

MESSAGES = {
    "bad_a": "Invalid input: a must be a valid integer",
    "bad_p": "Invalid input: p must be a valid integer",
    "bad_modulus": "Invalid input: p must be prime and greater than 2",
    "none": "No solutions",
}

# (a, p, expected roots)
_WORKED_EXAMPLES = [
    ("10", "13", ["6", "7"]),
    ("3", "7", []),
    ("4", "11", ["2", "9"]),
    ("0", "13", ["0"]),
]


def _setup_logging(verbose: int = 0, log_file: Optional[str] = None):
    """
    Configure root logging: 0 -> errors only, 1 -> info, 2+ -> debug traces from the engine.
    """
    if verbose <= 0:
        level = logging.ERROR
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(filename=log_file, level=level, format='%(asctime)s - %(message)s')


# ---------- deterministic RNG ----------
def _rng_for(seed: Optional[int], label: str) -> random.Random:
    """
    Deterministic RNG per (seed, label). If seed is None, a freshly seeded generator.

    :param seed: Optional seed for reproducibility.
    :param label: Which computation the stream feeds, e.g. the modulus.
    :return: random.Random instance.
    """
    if seed is None:
        return random.Random()
    b = f"{seed}:{label}".encode()
    h = hashlib.blake2b(b, digest_size=16).digest()
    return random.Random(int.from_bytes(h, "big"))


# ---------- formatting ----------
def format_solutions(roots: List[BigInt], p: BigInt) -> str:
    if not roots:
        return MESSAGES["none"]
    return "\n".join(f"x ≡ {r} mod {p}" for r in roots)


def _failure(method: str, kind: str, message: str, **extra) -> Dict:
    out = {"method": method, "error": kind, "message": message}
    out.update(extra)
    return out


# ---------- modes ----------
def solve_text(a_text: str, p_text: str, rng: Optional[random.Random] = None, mr_rounds: int = MR_ROUNDS,
               candidates: int = DETERMINISTIC_CANDIDATES, attempts: int = RANDOM_ATTEMPTS) -> Dict:
    """
    Full request: parse both numerals, validate the modulus, solve and format.
    Every engine error stops here and comes back as an "error" entry.
    """
    a_res = parse_bigint(a_text)
    if not a_res.ok:
        return _failure("cipolla", a_res.error.value, MESSAGES["bad_a"], a=a_text, p=p_text)
    p_res = parse_bigint(p_text)
    if not p_res.ok:
        return _failure("cipolla", p_res.error.value, MESSAGES["bad_p"], a=a_text, p=p_text)
    a, p = a_res.value, p_res.value
    if rng is None:
        rng = random.Random()

    start = _t.perf_counter()
    try:
        if not is_acceptable_modulus(p, rng, mr_rounds):
            return _failure("cipolla", "invalid_modulus", MESSAGES["bad_modulus"], a=str(a), p=str(p))
        roots = solve_square_root(a, p, rng, candidates, attempts)
    except ZpError as e:
        log.error("solve a=%s p=%s failed: %s", a, p, e)
        return _failure("cipolla", e.kind.value, f"Error: {e}", a=str(a), p=str(p))
    elapsed = _t.perf_counter() - start
    log.info("solved a=%s mod %s: %d root(s) in %.3fs", a, p, len(roots), elapsed)
    return {
        "method": "cipolla", "a": str(a), "p": str(p),
        "num_found": len(roots), "solutions": [str(r) for r in roots],
        "text": format_solutions(roots, p), "elapsed": round(elapsed, 6),
    }


def check_modulus(p_text: str, rng: Optional[random.Random] = None, mr_rounds: int = MR_ROUNDS) -> Dict:
    res = parse_bigint(p_text)
    if not res.ok:
        return _failure("check", res.error.value, MESSAGES["bad_p"], p=p_text)
    p = res.value
    if p <= 2 or not p.is_odd():
        path = "rejected"
    elif p < TRIAL_DIVISION_LIMIT:
        path = "trial_division"
    else:
        path = "miller_rabin"
    ok = is_acceptable_modulus(p, rng, mr_rounds)
    out = {"method": "check", "p": str(p), "acceptable": ok, "path": path}
    if path == "miller_rabin":
        out["mr_rounds"] = mr_rounds
    return out


def legendre_text(a_text: str, p_text: str) -> Dict:
    a_res, p_res = parse_bigint(a_text), parse_bigint(p_text)
    for res, key in ((a_res, "bad_a"), (p_res, "bad_p")):
        if not res.ok:
            return _failure("legendre", res.error.value, MESSAGES[key], a=a_text, p=p_text)
    try:
        symbol = legendre_symbol(a_res.value, p_res.value)
    except ZpError as e:
        log.error("legendre a=%s p=%s failed: %s", a_text, p_text, e)
        return _failure("legendre", e.kind.value, f"Error: {e}", a=a_text, p=p_text)
    return {"method": "legendre", "a": str(a_res.value), "p": str(p_res.value), "symbol": symbol}


def modpow_text(base_text: str, exp_text: str, mod_text: str) -> Dict:
    parsed = [parse_bigint(t) for t in (base_text, exp_text, mod_text)]
    for res, name in zip(parsed, ("base", "exp", "mod")):
        if not res.ok:
            return _failure("modpow", res.error.value, f"Invalid input: {name} must be a valid integer")
    base, exp, mod = (res.value for res in parsed)
    try:
        value = BigInt.modpow(base, exp, mod)
    except ZpError as e:
        return _failure("modpow", e.kind.value, f"Error: {e}")
    return {"method": "modpow", "base": str(base), "exp": str(exp), "mod": str(mod), "result": str(value)}


def sample_text(max_text: str, count: int, rng: Optional[random.Random] = None) -> Dict:
    res = parse_bigint(max_text)
    if not res.ok:
        return _failure("sample", res.error.value, "Invalid input: max must be a valid integer")
    if rng is None:
        rng = random.Random()
    try:
        values = [str(BigInt.random(res.value, rng)) for _ in range(count)]
    except ZpError as e:
        return _failure("sample", e.kind.value, f"Error: {e}")
    return {"method": "sample", "max": str(res.value), "samples": values}


def run_selftest(seed: Optional[int] = None, per_prime: int = 12) -> Dict:
    """
    Worked examples, then solver and primality verdicts cross-checked against sympy.
    """
    results = {}
    failures = 0

    examples = []
    for a, p, expected in _WORKED_EXAMPLES:
        out = solve_text(a, p, _rng_for(seed, p))
        got = sorted(out.get("solutions", []), key=int)
        ok = got == expected
        failures += not ok
        examples.append({"a": a, "p": p, "expected": expected, "got": got, "ok": ok})
    results["examples"] = examples

    cross = []
    for p in (13, 101, 1009, 7919):
        rng = _rng_for(seed, f"cross:{p}")
        bad = []
        for _ in range(per_prime):
            a = rng.randrange(p)
            got = sorted(int(r) for r in solve_square_root(BigInt(a), BigInt(p), rng))
            if got != sorted(sqrt_mod(a, p, all_roots=True)):
                bad.append(a)
        failures += len(bad)
        cross.append({"p": p, "checked": per_prime, "mismatches": bad})
    results["sqrt_vs_sympy"] = cross

    prim = []
    for n in (-5, 0, 1, 2, 3, 5, 9, 561, 997, 999, 1009, 1105, 7919, 8911, 104729, 1000003, 999999999989):
        ours = is_acceptable_modulus(BigInt(n), _rng_for(seed, f"prime:{n}"))
        ref = n > 2 and bool(isprime(n))
        failures += ours != ref
        prim.append({"n": n, "ours": ours, "sympy": ref})
    results["primality_vs_sympy"] = prim

    return {"method": "selftest", "passed": failures == 0, "failures": failures, "results": results}


def _emit(out: Dict, args: argparse.Namespace):
    """
    Emit JSON, or the human-readable text where the mode provides one.
    """
    if getattr(args, "text", False) and "text" in out:
        print(out["text"])
    elif getattr(args, "text", False) and "error" in out:
        print(out["message"])
    else:
        print(json.dumps(out, indent=2, ensure_ascii=False))


# ---------- Main ----------
def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Solve x^2 ≡ a (mod p) for an odd prime p")
    subparsers = parser.add_subparsers(dest="mode", required=True)

    # Common args
    parser.add_argument('--seed', type=int, help='Seed for reproducible random choices')
    parser.add_argument('--verbose', type=int, default=0)
    parser.add_argument('--log_file', type=str)

    # Solve
    solve_parser = subparsers.add_parser("solve")
    solve_parser.add_argument('--a', type=str, required=True)
    solve_parser.add_argument('--p', type=str, required=True)
    solve_parser.add_argument('--mr_rounds', type=int, default=MR_ROUNDS)
    solve_parser.add_argument('--candidates', type=int, default=DETERMINISTIC_CANDIDATES)
    solve_parser.add_argument('--attempts', type=int, default=RANDOM_ATTEMPTS)
    solve_parser.add_argument('--text', action='store_true')

    # Check
    check_parser = subparsers.add_parser("check")
    check_parser.add_argument('--p', type=str, required=True)
    check_parser.add_argument('--mr_rounds', type=int, default=MR_ROUNDS)

    # Legendre
    legendre_parser = subparsers.add_parser("legendre")
    legendre_parser.add_argument('--a', type=str, required=True)
    legendre_parser.add_argument('--p', type=str, required=True)

    # Modpow
    modpow_parser = subparsers.add_parser("modpow")
    modpow_parser.add_argument('--base', type=str, required=True)
    modpow_parser.add_argument('--exp', type=str, required=True)
    modpow_parser.add_argument('--mod', type=str, required=True)

    # Sample
    sample_parser = subparsers.add_parser("sample")
    sample_parser.add_argument('--max', type=str, required=True)
    sample_parser.add_argument('--count', type=int, default=1)

    # Selftest
    selftest_parser = subparsers.add_parser("selftest")
    selftest_parser.add_argument('--per_prime', type=int, default=12)

    args = parser.parse_args(argv)
    _setup_logging(args.verbose, args.log_file)

    # Validation
    if args.mode == "solve" and (args.candidates < 0 or args.attempts < 0):
        raise SystemExit("Error: --candidates and --attempts must be non-negative.")
    if args.mode in ("solve", "check") and args.mr_rounds < 1:
        raise SystemExit("Error: --mr_rounds must be at least 1.")
    if args.mode == "sample" and args.count < 1:
        raise SystemExit("Error: --count must be at least 1.")

    # Dispatch
    if args.mode == "solve":
        out = solve_text(args.a, args.p, _rng_for(args.seed, args.p), args.mr_rounds, args.candidates, args.attempts)
    elif args.mode == "check":
        out = check_modulus(args.p, _rng_for(args.seed, args.p), args.mr_rounds)
    elif args.mode == "legendre":
        out = legendre_text(args.a, args.p)
    elif args.mode == "modpow":
        out = modpow_text(args.base, args.exp, args.mod)
    elif args.mode == "sample":
        out = sample_text(args.max, args.count, _rng_for(args.seed, args.max))
    else:
        out = run_selftest(args.seed, args.per_prime)

    _emit(out, args)
    if "error" in out or out.get("passed") is False:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
