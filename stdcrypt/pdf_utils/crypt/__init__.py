"""
Decryption for documents protected by the standard (password-based) security
handler, revisions 2 to 4.

A :class:`.DecryptionSession` derives the file encryption key once, and then
decrypts indirect objects one at a time: every string and stream inside an
object is decrypted with a key derived from the object's ID and generation
number. Cross-reference streams, unencrypted metadata streams, crypt filter
dictionaries and the ``/Contents`` of signature dictionaries are left alone.

.. danger::
    RC4 and the legacy key derivation are (very) weak, and are only supported
    to read existing files.

Revisions 5 and 6 (AES-256) are recognised, but rejected with an
:class:`.UnsupportedRevisionError`. Documents using AES-128 crypt filters can
be opened, but decrypting any string or stream raises
:class:`.UnsupportedCipherError`.
"""

from .api import (
    ALL_PERMS,
    AuthResult,
    AuthStatus,
    CipherKind,
    ExcessiveNestingError,
    SecurityHandlerVersion,
    SymmetricCipher,
    UnsupportedCipherError,
    UnsupportedRevisionError,
    UnsupportedSecurityHandlerError,
)
from .ciphers import AESCipher, IdentityCipher, RC4Cipher, cipher_for
from .session import DecryptionSession
from .settings import DecryptionSettings
from .standard import (
    EncryptionDictionary,
    StandardSecurityHandler,
    StandardSecuritySettingsRevision,
)
from .traversal import ObjectTreeDecryptor

__all__ = [
    'ALL_PERMS',
    'AuthResult',
    'AuthStatus',
    'CipherKind',
    'ExcessiveNestingError',
    'SecurityHandlerVersion',
    'SymmetricCipher',
    'UnsupportedCipherError',
    'UnsupportedRevisionError',
    'UnsupportedSecurityHandlerError',
    'AESCipher',
    'RC4Cipher',
    'IdentityCipher',
    'cipher_for',
    'DecryptionSession',
    'DecryptionSettings',
    'EncryptionDictionary',
    'StandardSecurityHandler',
    'StandardSecuritySettingsRevision',
    'ObjectTreeDecryptor',
]
