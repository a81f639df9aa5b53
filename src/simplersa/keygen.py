"""Key Generation Utility for small-integer textbook RSA, including the prime checks its callers rely on.

This module derives a key pair from two caller-supplied primes. The public exponent is the smallest value coprime with
the totient and the private exponent the smallest non-negative inverse of it. The prime checks are deterministic over
the 32-bit range the keys are meant to live in.

Typical usage example:

    validate_primes(61, 53)
    (n, e), (_, d) = generate_key_pair(61, 53)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
# Witnesses making Miller-Rabin exact below 4,759,123,141.
_MR_WITNESSES: tuple[int, ...] = (2, 7, 61)
MODULUS_LIMIT: int = 1 << 32
BYTE_ALPHABET: int = 256


class KeyGenerationFailed(RuntimeError):
    """No usable exponent pair exists for the supplied factors."""


def _sieve(n: int = 10000) -> list[int]:
    """Implements the Sieve of Eratosthenes.

    Uses the textbook Sieve of Eratosthenes to generate a set of primes up to `n`.
    Includes memory space optimization and sieving until root.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    return [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]


def get_pre_primes(n: int = 10000, change: bool = False) -> list[int]:
    """Get the small primes, automatically generating if necessary.

    Uses the `_SMALL_PRIMES` global as a cache. Regeneration occurs if the requested range is greater, forced by
    `change` or the cache is empty.

    Args:
        n: The number up to which to generate primes. Must be >= 0.
        change: Whether to force a recomputation of primes. Defaults to False.

    Returns:
        List of primes in ascending order. All primes at least to `n` or more unless `change` is True.

    Raises:
        ValueError: If `n` is negative.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    if n > _SMALL_PRIMES_CAP or change or not _SMALL_PRIMES:
        _SMALL_PRIMES = _sieve(n)
        _SMALL_PRIMES_CAP = n
    return _SMALL_PRIMES


def _trial_division(no: int, n: int = 10000) -> bool:
    """Check the provided `no` against the known small primes.

    Args:
         no: The number to check. Must be integer and non-negative.
         n: The number up to which to generate primes. Passed to `get_pre_primes()`.

    Returns:
        False if `no` cannot be prime, True otherwise.
    """
    if no < 2:
        return False
    for prime in get_pre_primes(n):
        if prime**2 > no:
            return True
        if no % prime == 0:
            return False
    return True


def _miller_rabin(w: int, witnesses: tuple[int, ...] = _MR_WITNESSES) -> bool:
    """Perform a Miller-Rabin primality test against a fixed witness set.

    Args:
        w: Odd integer to be tested.
        witnesses: Bases to test against. The default set is exact for every `w` below 4,759,123,141.

    Returns:
        True if `w` passed every witness, False otherwise.
    """
    if w <= 3:
        return w == 2 or w == 3
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw >> a
    for b in witnesses:
        if b % w == 0:
            continue
        z = pow(b, m, w)
        if z == 1 or z == w - 1:
            continue
        for _ in range(1, a):
            z = pow(z, 2, w)
            if z == w - 1:
                break
        else:
            return False
    return True


def check_prime(candidate: int, n: int = 10000) -> bool:
    """Deterministic primality test for the 32-bit range.

    Runs a trial division with all primes up to `n` before finishing with a fixed-witness Miller-Rabin test.

    Args:
        candidate: The candidate prime to test.
        n: The number up to which to generate primes. Passed to `_trial_division()`.

    Returns:
        True if `candidate` is prime, False otherwise.
    """
    if candidate < 2:
        return False
    if not _trial_division(candidate, n):
        return False
    return _miller_rabin(candidate)


def validate_primes(p: int, q: int) -> None:
    """Checks the preconditions the key generator relies on but never enforces.

    Args:
        p: The first prime factor.
        q: The second prime factor.

    Raises:
        ValueError: If either factor is not prime, both are the same prime or the modulus falls outside
            (255, 2**32).
    """
    for name, val in (("p", p), ("q", q)):
        if not check_prime(val):
            raise ValueError(f"{name} = {val} is not a prime number.")
    # (p - 1) * (q - 1) is only the totient of p * q for distinct primes.
    if p == q:
        raise ValueError("p and q must be distinct.")
    if p * q <= 255:
        raise ValueError("p * q must be greater than 255 to cover every byte value.")
    if p * q >= MODULUS_LIMIT:
        raise ValueError("p * q must fit in 32 bits.")


def gcd(a: int, b: int) -> int:
    """Greatest common divisor by descending trial division.

    Starts at the smaller input and walks down to the first value dividing both. Fast enough here since one side is
    always a small exponent candidate.

    Args:
        a: The first non-negative integer.
        b: The second non-negative integer.

    Returns:
        The greatest common divisor, 0 only if both inputs are 0.
    """
    if a == 0 or b == 0:
        return a or b
    div = min(a, b)
    while a % div or b % div:
        div -= 1
    return div


def eea(a: int, b: int) -> tuple[int, int, int]:
    """Implements the Extended Euclidean Algorithm.

    Such that a*s0 + b*t0 = r0 = gcd(a, b).

    Args:
        a: The first natural number.
        b: The second natural number.

    Returns:
        Greatest common divisor of two integers.
        As well as the Bezout coefficients.
    """
    r0, r1 = a, b
    s0, s1, t0, t1 = 1, 0, 0, 1
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    return r0, s0, t0


def _public_exponent(totient: int) -> int:
    """Smallest e in [2, totient) coprime with the totient."""
    for e in range(2, totient):
        if gcd(e, totient) == 1:
            return e
    raise KeyGenerationFailed(f"No public exponent below {totient} is coprime with it.")


def _private_exponent(e: int, totient: int) -> int:
    """Smallest non-negative d with (d * e) % totient == 1.

    Args:
        e: The public exponent.
        totient: Euler's totient of the modulus.

    Returns:
        The private exponent.

    Raises:
        KeyGenerationFailed: If `e` has no inverse modulo `totient`.
    """
    g, s, _ = eea(e, totient)
    if g != 1 or totient < 2:
        raise KeyGenerationFailed(f"{e} has no inverse modulo {totient}.")
    return s % totient


def generate_key_pair(p: int, q: int) -> tuple[tuple[int, int], tuple[int, int]]:
    """Generates an RSA key pair from two primes.

    Primality of `p` and `q` is not verified here, see `validate_primes`. Repeated calls with the same factors always
    produce the same pair.

    Args:
        p: The first prime factor.
        q: The second prime factor.

    Returns:
        A tuple of (public, private) sub-tuples (modulus, exponent).

    Raises:
        KeyGenerationFailed: If no public exponent is coprime with the totient.
    """
    n = p * q
    totient = (p - 1) * (q - 1)
    e = _public_exponent(totient)
    d = _private_exponent(e, totient)
    return (n, e), (n, d)
