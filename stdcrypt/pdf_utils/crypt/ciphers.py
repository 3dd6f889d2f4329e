from stdcrypt.pdf_utils.crypt._util import rc4_encrypt
from stdcrypt.pdf_utils.crypt.api import (
    CipherKind,
    SymmetricCipher,
    UnsupportedCipherError,
)

__all__ = ['RC4Cipher', 'AESCipher', 'IdentityCipher', 'cipher_for']


class RC4Cipher(SymmetricCipher):
    """
    RC4 cipher, as used by the ``/V2`` crypt filter method and by all
    security handlers before version 4.
    """

    kind = CipherKind.STREAM

    def encrypt(self, key, plaintext: bytes) -> bytes:
        """
        Encrypt data using RC4.

        :param key:
            Local encryption key.
        :param plaintext:
            Plaintext to encrypt.
        :return:
            Ciphertext.
        """
        return rc4_encrypt(key, plaintext)

    def decrypt(self, key, ciphertext: bytes) -> bytes:
        """
        Decrypt data using RC4.

        :param key:
            Local encryption key.
        :param ciphertext:
            Ciphertext to decrypt.
        :return:
            Plaintext.
        """
        return rc4_encrypt(key, ciphertext)


class AESCipher(SymmetricCipher):
    """
    AES in CBC mode, with a random 16-byte IV prepended to the data.

    Not supported in this version: instances can be created (so that
    documents using AES can be recognised as such), but every encryption or
    decryption attempt raises :class:`.UnsupportedCipherError`.

    :param keylen:
        Key length in bytes, 16 or 32.
    """

    kind = CipherKind.BLOCK_CHAINED

    def __init__(self, keylen=16):
        if keylen not in (16, 32):
            raise UnsupportedCipherError(
                "Only AES-128 and AES-256 exist in PDF"
            )
        self.keylen = keylen

    def _unsupported(self):
        return UnsupportedCipherError(
            f"Decryption for AES-{self.keylen * 8} not currently supported."
        )

    def encrypt(self, key, plaintext: bytes) -> bytes:
        raise self._unsupported()

    def decrypt(self, key, ciphertext: bytes) -> bytes:
        raise self._unsupported()


class IdentityCipher(SymmetricCipher):
    """
    Cipher for data that is not encrypted at all. Keys are ignored.
    """

    kind = CipherKind.IDENTITY

    def encrypt(self, key, plaintext: bytes) -> bytes:
        return plaintext

    def decrypt(self, key, ciphertext: bytes) -> bytes:
        return ciphertext


def cipher_for(kind: CipherKind, keylen: int = 16) -> SymmetricCipher:
    """
    Instantiate the cipher implementing a given :class:`.CipherKind`.

    :param kind:
        The cipher family.
    :param keylen:
        Key length in bytes (only relevant for AES).
    """
    if kind == CipherKind.STREAM:
        return RC4Cipher()
    elif kind == CipherKind.IDENTITY:
        return IdentityCipher()
    else:
        return AESCipher(keylen=keylen)
