import enum
from dataclasses import dataclass
from typing import Optional

from stdcrypt.pdf_utils import misc

__all__ = [
    'UnsupportedSecurityHandlerError', 'UnsupportedRevisionError',
    'UnsupportedCipherError', 'ExcessiveNestingError',
    'AuthStatus', 'AuthResult', 'SecurityHandlerVersion', 'CipherKind',
    'SymmetricCipher', 'ALL_PERMS',
]


class UnsupportedSecurityHandlerError(misc.PdfReadError):
    """
    Raised when a document is protected by a security handler (or a
    configuration thereof) that this library cannot process.
    """
    pass


class UnsupportedRevisionError(UnsupportedSecurityHandlerError):
    """
    Raised when the standard security handler's revision is not one of
    2, 3 or 4. Revisions 5 and 6 are recognised, but not supported.

    :param revision:
        The offending revision number.
    """

    def __init__(self, revision):
        self.revision = revision
        if revision in (5, 6):
            msg = (
                f"Revision {revision} of the standard security handler "
                f"is not supported."
            )
        else:
            msg = f"Unknown standard security handler revision: {revision}."
        super().__init__(msg)


class UnsupportedCipherError(misc.PdfError, NotImplementedError):
    """
    Raised when decryption requires a cipher that is not implemented, as
    opposed to the document being damaged.
    """
    pass


class ExcessiveNestingError(misc.PdfReadError):
    """
    Raised when an object is nested more deeply than the configured limit.
    """
    pass


class AuthStatus(misc.OrderedEnum):
    """
    Describes the status after an authentication attempt.
    """

    FAILED = 0
    USER = 1
    OWNER = 2


@dataclass(frozen=True)
class AuthResult:
    """
    Describes the result of an authentication attempt.
    """

    status: AuthStatus
    """
    Authentication status after the authentication attempt.
    """

    permission_flags: Optional[int] = None
    """
    The ``/P`` value of the encryption dictionary (as a signed integer),
    reported when authenticating with the user password.
    """


@enum.unique
class SecurityHandlerVersion(misc.VersionEnum):
    """
    Indicates the security handler's version (the ``/V`` entry).

    The enum constants are named more or less in accordance with the
    cryptographic algorithms they permit.
    """
    RC4_40 = 1
    RC4_LONGER_KEYS = 2
    RC4_OR_AES128 = 4
    AES256 = 5

    OTHER = None
    """
    Placeholder value for unknown algorithm codes.
    """

    @classmethod
    def from_number(cls, value) -> 'SecurityHandlerVersion':
        try:
            return SecurityHandlerVersion(value)
        except ValueError:
            return SecurityHandlerVersion.OTHER


@enum.unique
class CipherKind(enum.Enum):
    """
    The family of symmetric cipher used to encrypt strings and streams.
    """

    STREAM = enum.auto()
    """
    RC4, no padding, no IV.
    """

    BLOCK_CHAINED = enum.auto()
    """
    AES in CBC mode, with the IV prepended to the ciphertext.
    """

    IDENTITY = enum.auto()
    """
    No encryption at all (the ``/Identity`` crypt filter, or ``/CFM /None``).
    """


class SymmetricCipher:
    """
    Generic symmetric cipher applied to string and stream data with a
    per-object key.
    """

    kind: CipherKind = None

    def encrypt(self, key: bytes, plaintext: bytes) -> bytes:
        """
        Encrypt plaintext with the specified key.

        :param key:
            The object key.
        :param plaintext:
            Plaintext to encrypt.
        :return:
            The resulting ciphertext.
        """
        raise NotImplementedError

    def decrypt(self, key: bytes, ciphertext: bytes) -> bytes:
        """
        Decrypt ciphertext with the specified key.

        :param key:
            The object key.
        :param ciphertext:
            Ciphertext to decrypt.
        :return:
            The resulting plaintext.
        """
        raise NotImplementedError


ALL_PERMS = -4
"""
Dummy value that translates to "everything is allowed" in an
encrypted PDF document.
"""
