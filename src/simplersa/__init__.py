"""Textbook RSA over small integers, in an Academic Sense.

Provides key generation from two caller-supplied primes and byte-wise encryption and decryption through modular
exponentiation. The modulus must fit in 32 bits and exceed 255. Not meant to protect anything.

Typical usage example:

    validate_primes(61, 53)
    ctx = RSAContext()
    if ctx.init(61, 53):
        c = ctx.encrypt(b"Hi there!")
        r = ctx.decrypt(c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from simplersa.keygen import check_prime
from simplersa.keygen import generate_key_pair
from simplersa.keygen import KeyGenerationFailed
from simplersa.keygen import validate_primes
from simplersa.rsa import decode_ciphertext
from simplersa.rsa import decrypt
from simplersa.rsa import decrypt_unit
from simplersa.rsa import encode_ciphertext
from simplersa.rsa import encrypt
from simplersa.rsa import encrypt_byte
from simplersa.rsa import generate_keys
from simplersa.rsa import KeyPair
from simplersa.rsa import RSAContext
from simplersa.rsa import RSAKey

__version__ = "0.0.1"
__all__ = [
    "KeyGenerationFailed",
    "KeyPair",
    "RSAContext",
    "RSAKey",
    "check_prime",
    "decode_ciphertext",
    "decrypt",
    "decrypt_unit",
    "encode_ciphertext",
    "encrypt",
    "encrypt_byte",
    "generate_key_pair",
    "generate_keys",
    "validate_primes",
]
