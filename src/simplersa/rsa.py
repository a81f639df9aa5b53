"""Provides the byte-wise RSA transform, the key types and the ciphertext wrapper.

Facilitates "textbook" RSA over a small modulus, one byte at a time. Keys are immutable values handed explicitly to
every operation; `RSAContext` offers the init/encrypt/decrypt session interface on top of them.

Typical usage example:

    pub, priv = generate_keys(61, 53)
    c = encrypt(b"Hi there!", pub)
    r = decrypt(c, priv)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import base64
from collections.abc import Iterable
import typing
import warnings

from pyasn1 import error
from pyasn1.codec.der import decoder
from pyasn1.codec.der import encoder
from pyasn1.type import namedtype
from pyasn1.type import univ
from pyasn1_modules import rfc8017

from simplersa import keygen

# No real OID exists for byte-wise RSAEP, so we extend the "baseline" rsaEncryption (PKCS v1.5 padded) to branch 8
id_RSAES_bytewise = rfc8017.rsaEncryption + (8,)


class CipherUnits(univ.SequenceOf):
    componentType = univ.Integer()


class RSAMessage(univ.Sequence):
    """Wrapper carrying the cipher units along with the scheme that produced them."""
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("encryptionAlgorithm", rfc8017.AlgorithmIdentifier()),
        namedtype.NamedType("encryptedData", CipherUnits()),
    )


class RSAKey(typing.NamedTuple):
    """A (modulus, exponent) pair, whether public or private.

    Attributes:
        mod: The modulus of the keypair.
        expo: The exponent of the key.
    """
    mod: int
    expo: int


class KeyPair(typing.NamedTuple):
    """The public and private key derived from one pair of primes, sharing a modulus."""
    public: RSAKey
    private: RSAKey


def generate_keys(p: int, q: int) -> KeyPair:
    """Generates the key pair for two primes.

    Args:
        p: The first prime factor.
        q: The second prime factor.

    Returns:
        The public and private keys.

    Raises:
        KeyGenerationFailed: If no public exponent is coprime with the totient.
    """
    (n, e), (_, d) = keygen.generate_key_pair(p, q)
    return KeyPair(RSAKey(n, e), RSAKey(n, d))


def encrypt_byte(m: int, key: RSAKey) -> int:
    """Core RSA primitive for a single plaintext byte, m**e mod n.

    Args:
        m: The byte value to encrypt.
        key: The key to encrypt with, usually public.

    Returns:
        The cipher unit.
    """
    return pow(m, key.expo, key.mod)


def decrypt_unit(c: int, key: RSAKey) -> int:
    """Reverses `encrypt_byte`, keeping only the low-order byte of c**d mod n.

    Args:
        c: The cipher unit to decrypt.
        key: The key to decrypt with, usually private.

    Returns:
        The plaintext byte value.
    """
    return pow(c, key.expo, key.mod) & 0xFF


def encrypt(plaintext: Iterable[int], key: RSAKey) -> list[int]:
    """Encrypts every byte of the plaintext independently.

    Args:
        plaintext: The bytes to encrypt.
        key: The key to encrypt with.

    Returns:
        Cipher units, index-aligned with `plaintext`.
    """
    return [encrypt_byte(m, key) for m in plaintext]


def decrypt(cipher: Iterable[int], key: RSAKey) -> bytes:
    """Decrypts every cipher unit independently.

    A modulus that cannot hold every byte value still decrypts, but the truncated output is most likely wrong, so a
    warning is issued.

    Args:
        cipher: The cipher units to decrypt.
        key: The key to decrypt with.

    Returns:
        The plaintext, index-aligned with `cipher`.
    """
    if key.mod < keygen.BYTE_ALPHABET:
        warnings.warn(f"Modulus {key.mod} does not cover every byte value! Output may be truncated.", RuntimeWarning)
    return bytes(decrypt_unit(c, key) for c in cipher)


class RSAContext:
    """Holds the key pair of a session and exposes the init/encrypt/decrypt interface.

    Attributes:
        public_key: The published public key, None until `init` succeeds.
        private_key: The published private key, None until `init` succeeds.
    """

    def __init__(self) -> None:
        self.public_key: RSAKey | None = None
        self.private_key: RSAKey | None = None

    def init(self, p: int, q: int) -> bool:
        """Attempts key generation, publishing the keys on success.

        Args:
            p: The first prime factor.
            q: The second prime factor.

        Returns:
            True if a key pair was generated, False otherwise.
        """
        try:
            self.public_key, self.private_key = generate_keys(p, q)
        except keygen.KeyGenerationFailed:
            return False
        return True

    def encrypt(self, plaintext: Iterable[int], key: RSAKey | None = None) -> list[int]:
        """Encrypts with `key`, defaulting to the published public key."""
        key = key or self.public_key
        if key is None:
            raise RuntimeError("No key available, run init first.")
        return encrypt(plaintext, key)

    def decrypt(self, cipher: Iterable[int], key: RSAKey | None = None) -> bytes:
        """Decrypts with `key`, defaulting to the published private key."""
        key = key or self.private_key
        if key is None:
            raise RuntimeError("No key available, run init first.")
        return decrypt(cipher, key)


def encode_ciphertext(cipher: Iterable[int]) -> bytes:
    """Wraps cipher units into a DER encoded `RSAMessage`.

    Args:
        cipher: The cipher units to wrap.

    Returns:
        Base64 encoded message.
    """
    enc_id = rfc8017.AlgorithmIdentifier()
    enc_id["algorithm"] = id_RSAES_bytewise
    enc_id["parameters"] = univ.Null("")
    units = CipherUnits()
    units.clear()
    units.extend(cipher)
    pld = RSAMessage()
    pld["encryptionAlgorithm"] = enc_id
    pld["encryptedData"] = units
    return base64.b64encode(encoder.encode(pld))


def decode_ciphertext(message: bytes | str) -> list[int]:
    """Unwraps the cipher units of a base64 encoded `RSAMessage`.

    Args:
        message: The base64 encoded message.

    Returns:
        The cipher units.

    Raises:
        RuntimeError: If the message is malformed or was not produced by byte-wise RSA.
    """
    try:
        pld, _ = decoder.decode(base64.b64decode(message), asn1Spec=RSAMessage())
    except (error.PyAsn1Error, ValueError) as exc:
        raise RuntimeError("Malformed ciphertext.") from exc
    if pld["encryptionAlgorithm"]["algorithm"] != id_RSAES_bytewise:
        raise RuntimeError("Unknown encryption algorithm.")
    return [int(unit) for unit in pld["encryptedData"]]
