# pylint: disable=protected-access,missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import pytest
import sympy

from simplersa import keygen

base_primetest_cases = [
    # Edge Cases (neither)
    (0, False),
    (1, False),
    # Known Primes
    (2, True),
    (3, True),
    (53, True),
    (61, True),
    (9973, True),
    (65521, True),
    # Composite
    (4, False),
    (9, False),
    (3233, False),
    # Fermat Pseudoprimes
    (341, False),  # 11 * 31
    (561, False),  # 3 * 11 * 17 (Carmichael number)
    (1105, False),  # 5 * 13 * 17 (Carmichael number)
    # Strong pseudoprimes
    (2047, False),  # base 2
    (3215031751, False),  # bases 2, 3, 5 and 7
    # Large squares of primes escape trial division
    (10007**2, False),
    (65521**2, False),
    # Largest 32-bit prime
    (4294967291, True),
]

degenerate_pairs = [(2, 2), (2, 3), (3, 2)]


@pytest.mark.parametrize("n", [0, 1, 2, 20, 50, 1000, 10000])
def test_sieve_sane(n):
    assert keygen._sieve(n) == list(sympy.primerange(2, n + 1))


@pytest.mark.parametrize("n", [-10, -1])
def test_get_pre_primes_errors(n):
    with pytest.raises(ValueError):
        keygen.get_pre_primes(n)


def test_get_pre_primes_caches(mocker):
    mocked_primes = [2, 3, 5, 7, 11]
    mocker.patch("simplersa.keygen._sieve", return_value=mocked_primes)
    mocker.patch("simplersa.keygen._SMALL_PRIMES", [])
    mocker.patch("simplersa.keygen._SMALL_PRIMES_CAP", 0)

    rs = keygen.get_pre_primes(50)
    keygen._sieve.assert_called_once_with(50)
    assert rs == mocked_primes


def test_get_pre_primes_cache_hit(mocker):
    mocked_primes = [2, 3, 5, 7, 11]
    mocker.patch("simplersa.keygen._sieve")
    mocker.patch("simplersa.keygen._SMALL_PRIMES", mocked_primes)
    mocker.patch("simplersa.keygen._SMALL_PRIMES_CAP", 50)

    assert keygen.get_pre_primes(25) == mocked_primes
    assert keygen.get_pre_primes(50) == mocked_primes
    keygen._sieve.assert_not_called()


def test_get_pre_primes_cache_forced(mocker):
    mocked_primes = [2, 3, 5, 7, 11]
    mocker.patch("simplersa.keygen._sieve", return_value=mocked_primes)
    mocker.patch("simplersa.keygen._SMALL_PRIMES", [2, 3, 5, 7, 11, 13, 17, 19, 23])
    mocker.patch("simplersa.keygen._SMALL_PRIMES_CAP", 75)

    rs = keygen.get_pre_primes(50, change=True)
    keygen._sieve.assert_called_once_with(50)
    assert rs == mocked_primes


@pytest.mark.parametrize("n,expected", base_primetest_cases)
def test_check_prime(n, expected):
    assert keygen.check_prime(n) == expected


def test_check_prime_agrees_with_sympy():
    for n in range(5000):
        assert keygen.check_prime(n) == sympy.isprime(n), n


@pytest.mark.parametrize("n", [2047, 3215031751, 25326001])
def test_miller_rabin_catches_strong_pseudoprimes(n):
    assert not keygen._miller_rabin(n)


def test_miller_rabin_witness_set_matters():
    # 2047 = 23 * 89 fools base 2 alone.
    assert keygen._miller_rabin(2047, (2,))
    assert not keygen._miller_rabin(2047)


@pytest.mark.parametrize("p,q", [(61, 53), (2, 131), (17, 19), (65521, 65519)])
def test_validate_primes_accepts(p, q):
    keygen.validate_primes(p, q)


@pytest.mark.parametrize("p,q,match", [
    (4, 61, "p = 4 is not a prime number."),
    (61, 91, "q = 91 is not a prime number."),
    (3, 5, "greater than 255"),
    (11, 23, "greater than 255"),
    (17, 17, "p and q must be distinct."),
    (2, 2, "p and q must be distinct."),
    (65537, 65539, "fit in 32 bits"),
])
def test_validate_primes_rejects(p, q, match):
    with pytest.raises(ValueError, match=match):
        keygen.validate_primes(p, q)


@pytest.mark.parametrize("a,b,expected", [(0, 0, 0), (0, 7, 7), (7, 0, 7), (1, 3120, 1), (12, 18, 6), (7, 3120, 1),
                                          (3120, 3120, 3120)])
def test_gcd_concrete(a, b, expected):
    assert keygen.gcd(a, b) == expected


def test_gcd_agrees_with_sympy():
    for a in range(1, 60):
        for b in range(1, 60):
            assert keygen.gcd(a, b) == sympy.igcd(a, b)


@pytest.mark.parametrize("a,b", [(7, 3120), (240, 46), (17, 3120), (1, 1), (65537, 4292739600)])
def test_eea_bezout(a, b):
    g, s, t = keygen.eea(a, b)
    assert g == sympy.igcd(a, b)
    assert a * s + b * t == g


def test_generate_key_pair_worked_example():
    (n, e), (n2, d) = keygen.generate_key_pair(61, 53)
    assert n == n2 == 3233
    assert e == 7
    assert d == 1783
    assert (d * e) % 3120 == 1


@pytest.mark.parametrize("p,q", [(61, 53), (2, 131), (17, 19), (251, 257), (65521, 65519), (5, 7)])
def test_generate_key_pair_minimal(p, q):
    (n, e), (_, d) = keygen.generate_key_pair(p, q)
    totient = (p - 1) * (q - 1)
    assert n == p * q
    assert e == next(x for x in range(2, totient) if sympy.igcd(x, totient) == 1)
    assert d == sympy.mod_inverse(e, totient)
    assert 0 <= d < totient


def test_generate_key_pair_minimal_linear_search():
    (_, e), (_, d) = keygen.generate_key_pair(61, 53)
    assert d == next(x for x in range(3120) if (x * e) % 3120 == 1)


def test_generate_key_pair_deterministic():
    assert keygen.generate_key_pair(1009, 1013) == keygen.generate_key_pair(1009, 1013)


@pytest.mark.parametrize("p,q", degenerate_pairs)
def test_generate_key_pair_fails(p, q):
    with pytest.raises(keygen.KeyGenerationFailed):
        keygen.generate_key_pair(p, q)


def test_generate_key_pair_no_coprime(mocker):
    mocker.patch("simplersa.keygen.gcd", return_value=2)
    with pytest.raises(keygen.KeyGenerationFailed, match="No public exponent"):
        keygen.generate_key_pair(61, 53)


def test_generate_key_pair_no_inverse(mocker):
    mocker.patch("simplersa.keygen.eea", return_value=(2, 0, 0))
    with pytest.raises(keygen.KeyGenerationFailed, match="has no inverse"):
        keygen.generate_key_pair(61, 53)


@pytest.mark.slow
def test_generate_key_pair_sweep():
    candidates = list(sympy.primerange(2, 200))
    for p in candidates:
        for q in candidates:
            totient = (p - 1) * (q - 1)
            if totient <= 2:
                continue
            (_, e), (_, d) = keygen.generate_key_pair(p, q)
            assert sympy.igcd(e, totient) == 1
            assert (d * e) % totient == 1
