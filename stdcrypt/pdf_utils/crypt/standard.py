import enum
import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from stdcrypt.pdf_utils import generic, misc

from ._legacy import (
    compute_u_value_r2,
    compute_u_value_r34,
    derive_legacy_file_key,
    legacy_derive_object_key,
    legacy_normalise_pw,
    recover_user_password,
)
from ._util import as_signed
from .api import (
    ALL_PERMS,
    AuthResult,
    AuthStatus,
    CipherKind,
    SecurityHandlerVersion,
    SymmetricCipher,
    UnsupportedCipherError,
    UnsupportedRevisionError,
    UnsupportedSecurityHandlerError,
)
from .ciphers import cipher_for
from .settings import DecryptionSettings

__all__ = [
    'StandardSecuritySettingsRevision', 'EncryptionDictionary',
    'StandardSecurityHandler', 'SUPPORTED_REVISIONS',
]

logger = logging.getLogger(__name__)


@enum.unique
class StandardSecuritySettingsRevision(misc.VersionEnum):
    """Indicate the standard security handler revision (``/R``)."""

    RC4_BASIC = 2
    RC4_EXTENDED = 3
    RC4_OR_AES128 = 4
    AES256_DRAFT = 5
    AES256 = 6


SUPPORTED_REVISIONS = frozenset({
    StandardSecuritySettingsRevision.RC4_BASIC,
    StandardSecuritySettingsRevision.RC4_EXTENDED,
    StandardSecuritySettingsRevision.RC4_OR_AES128,
})

IDENTITY = '/Identity'
NO_FILTER_METHOD = '/None'

_CIPHERS_BY_METHOD = {
    NO_FILTER_METHOD: (CipherKind.IDENTITY, None),
    '/V2': (CipherKind.STREAM, None),
    '/AESV2': (CipherKind.BLOCK_CHAINED, 16),
    '/AESV3': (CipherKind.BLOCK_CHAINED, 32),
}


CRYPT_FILTER_VERSIONS = frozenset({
    SecurityHandlerVersion.RC4_OR_AES128, SecurityHandlerVersion.AES256
})


@dataclass(frozen=True)
class _DefaultFilter:
    method: Optional[str] = None
    keylen_bits: Optional[int] = None


def _read_default_filter(encrypt_dict: generic.DictionaryObject,
                         key: str) -> _DefaultFilter:
    name = encrypt_dict.get(key, IDENTITY)
    if name == IDENTITY:
        return _DefaultFilter(method=NO_FILTER_METHOD)
    try:
        cfdict = encrypt_dict['/CF'][name]
    except (KeyError, TypeError):
        cfdict = None
    if not isinstance(cfdict, generic.DictionaryObject):
        logger.warning(
            f"Crypt filter {name} (used in {key}) is not defined; "
            f"assuming RC4."
        )
        return _DefaultFilter()
    method = str(cfdict.get('/CFM', NO_FILTER_METHOD))
    length = cfdict.get('/Length')
    if length is None:
        keylen_bits = 128 if method == '/AESV2' else None
    else:
        keylen_bits = int(length)
        # some producers give the length of the key in bytes
        if keylen_bits < 40:
            keylen_bits *= 8
    return _DefaultFilter(method=method, keylen_bits=keylen_bits)


def _raw_bytes(obj) -> bytes:
    try:
        return obj.original_bytes
    except AttributeError:
        raise misc.PdfReadError(
            f"Expected a string in the encryption dictionary, not {type(obj)}"
        )


@dataclass(frozen=True)
class EncryptionDictionary:
    """
    The entries of a document's encryption dictionary that matter to the
    standard security handler.
    """

    revision: int
    """
    Security handler revision (``/R``), an integer between 2 and 6.
    """

    owner_check_value: bytes
    """
    The ``/O`` entry (32 bytes for revisions 2 to 4).
    """

    permissions: int = ALL_PERMS
    """
    The ``/P`` entry, as a signed 32-bit integer.
    """

    version: SecurityHandlerVersion = SecurityHandlerVersion.RC4_40
    """
    The algorithm code (``/V``).
    """

    keylen_bits: int = 40
    """
    The ``/Length`` entry, in bits.
    """

    user_check_value: Optional[bytes] = None
    """
    The ``/U`` entry, if available.
    """

    encrypt_metadata: bool = True
    """
    The ``/EncryptMetadata`` entry.
    """

    stream_filter_method: Optional[str] = None
    """
    The ``/CFM`` entry of the default stream crypt filter (``/StmF``), or
    ``/None`` if that filter is ``/Identity``.
    Only used by ``/V 4`` handlers; ``None`` means RC4.
    """

    string_filter_method: Optional[str] = None
    """
    The ``/CFM`` entry of the default string crypt filter (``/StrF``),
    with the same conventions as :attr:`stream_filter_method`.
    """

    @property
    def keylen_bytes(self) -> int:
        """
        The length of the file encryption key in bytes.

        :raise misc.PdfReadError:
            Raised if the declared key length is not valid.
        """
        if self.version == SecurityHandlerVersion.RC4_40:
            return 5
        if self.keylen_bits % 8 != 0:
            raise misc.PdfReadError("Key length must be a multiple of 8")
        keylen = self.keylen_bits // 8
        if not (5 <= keylen <= 16):
            raise misc.PdfReadError("Key length must be between 5 and 16")
        return keylen

    @classmethod
    def from_pdf_object(cls, encrypt_dict: generic.DictionaryObject) \
            -> 'EncryptionDictionary':
        """
        Gather the relevant values from a parsed encryption dictionary.

        :param encrypt_dict:
            The document's ``/Encrypt`` dictionary.
        :raise UnsupportedSecurityHandlerError:
            Raised if the dictionary does not belong to the standard
            security handler.
        """
        handler_name = encrypt_dict.get('/Filter', '/Standard')
        if handler_name != '/Standard':
            raise UnsupportedSecurityHandlerError(
                f"There is no security handler named {handler_name}."
            )
        try:
            odata = _raw_bytes(encrypt_dict['/O'])
            revision = int(encrypt_dict['/R'])
        except KeyError:
            raise misc.PdfReadError("/O and /R entries must be present")

        version = SecurityHandlerVersion.from_number(
            int(encrypt_dict.get('/V', 0))
        )
        stream_filter = string_filter = _DefaultFilter()
        if version in CRYPT_FILTER_VERSIONS:
            stream_filter = _read_default_filter(encrypt_dict, '/StmF')
            string_filter = _read_default_filter(encrypt_dict, '/StrF')
        try:
            keylen_bits = int(encrypt_dict['/Length'])
        except KeyError:
            keylen_bits = (
                stream_filter.keylen_bits or string_filter.keylen_bits or 40
            )
        return EncryptionDictionary(
            revision=revision,
            owner_check_value=odata,
            permissions=as_signed(
                int(encrypt_dict.get('/P', ALL_PERMS))
            ),
            version=version,
            keylen_bits=keylen_bits,
            user_check_value=encrypt_dict.get_and_apply('/U', _raw_bytes),
            encrypt_metadata=encrypt_dict.get_and_apply(
                '/EncryptMetadata', bool, default=True
            ),
            stream_filter_method=stream_filter.method,
            string_filter_method=string_filter.method,
        )


def _check_revision(revision) -> StandardSecuritySettingsRevision:
    try:
        rev = StandardSecuritySettingsRevision(revision)
    except ValueError:
        raise UnsupportedRevisionError(revision)
    if rev not in SUPPORTED_REVISIONS:
        raise UnsupportedRevisionError(revision)
    return rev


def _select_cipher(version: SecurityHandlerVersion, method: Optional[str]) \
        -> Tuple[CipherKind, Optional[int]]:
    if method is None or version not in CRYPT_FILTER_VERSIONS:
        return CipherKind.STREAM, None
    try:
        return _CIPHERS_BY_METHOD[method]
    except KeyError:
        raise UnsupportedCipherError(f"No such crypt filter method: {method}")


class StandardSecurityHandler:
    """
    Implementation of the standard (password-based) security handler,
    revisions 2 to 4.

    The file encryption key is derived once, when the handler is created.

    :param encrypt_dict:
        The document's encryption dictionary.
    :param document_id:
        The first element of the document's ``/ID`` array, or ``b''``.
    :param password:
        The password to derive the key from, as a string (interpreted as
        Latin-1) or byte string. ``None`` is treated as the empty password.
    :param settings:
        Decryption settings.
    :raise UnsupportedRevisionError:
        Raised if the handler's revision is not supported. No key is derived
        in that case.
    :raise UnsupportedCipherError:
        Raised if a default crypt filter uses an unknown method.
    """

    def __init__(self, encrypt_dict: EncryptionDictionary,
                 document_id: bytes = b'',
                 password: Union[str, bytes, None] = None,
                 settings: Optional[DecryptionSettings] = None):
        self.revision = _check_revision(encrypt_dict.revision)
        self.encrypt_dict = encrypt_dict
        self.settings = settings or DecryptionSettings()
        self.document_id = bytes(document_id)
        self.keylen = encrypt_dict.keylen_bytes

        self.string_cipher = self._build_cipher(
            encrypt_dict.string_filter_method, 'strings'
        )
        self.stream_cipher = self._build_cipher(
            encrypt_dict.stream_filter_method, 'streams'
        )

        pw_bytes = legacy_normalise_pw(password)
        self.auth_result: Optional[AuthResult] = None
        if encrypt_dict.user_check_value is not None \
                and self.settings.authenticate:
            self.auth_result, key = self._authenticate(pw_bytes)
        else:
            key = None
        if key is None:
            key = self._derive_file_key(pw_bytes)
        self._shared_key = key
        logger.debug(
            f"Derived {self.keylen * 8}-bit file encryption key "
            f"(revision {self.revision.value})"
        )

    def _build_cipher(self, method: Optional[str], what: str) \
            -> SymmetricCipher:
        kind, aes_keylen = _select_cipher(self.encrypt_dict.version, method)
        if kind == CipherKind.BLOCK_CHAINED:
            logger.warning(
                f"Document uses AES-{aes_keylen * 8} for {what}; these "
                f"cannot be decrypted."
            )
        return cipher_for(kind, keylen=aes_keylen)

    @property
    def encrypt_metadata(self) -> bool:
        return self.encrypt_dict.encrypt_metadata

    def leaf_cipher(self, is_stream: bool = False) -> SymmetricCipher:
        """
        The cipher applied to string data, or to stream data if ``is_stream``
        is ``True``.
        """
        return self.stream_cipher if is_stream else self.string_cipher

    def _derive_file_key(self, pw_bytes: bytes) -> bytes:
        ed = self.encrypt_dict
        return derive_legacy_file_key(
            pw_bytes, self.revision.value, self.keylen,
            ed.owner_check_value, ed.permissions, self.document_id,
            metadata_encrypt=ed.encrypt_metadata,
            gate_metadata_flag=self.settings.gate_metadata_flag
        )

    def _auth_user_password(self, pw_bytes: bytes) -> Tuple[bool, bytes]:
        ed = self.encrypt_dict
        user_token = ed.user_check_value
        if self.revision == StandardSecuritySettingsRevision.RC4_BASIC:
            user_tok_supplied, key = compute_u_value_r2(
                pw_bytes, ed.owner_check_value, ed.permissions,
                self.document_id, keylen=self.keylen
            )
        else:
            user_tok_supplied, key = compute_u_value_r34(
                pw_bytes, self.revision.value, self.keylen,
                ed.owner_check_value, ed.permissions, self.document_id,
                metadata_encrypt=ed.encrypt_metadata,
                gate_metadata_flag=self.settings.gate_metadata_flag
            )
            # only the first 16 bytes are significant
            user_tok_supplied = user_tok_supplied[:16]
            user_token = user_token[:16]
        return user_tok_supplied == user_token, key

    def _authenticate(self, pw_bytes: bytes) \
            -> Tuple[AuthResult, Optional[bytes]]:
        # check the owner password first
        prp_userpass = recover_user_password(
            pw_bytes, self.encrypt_dict.owner_check_value,
            self.revision.value, self.keylen
        )
        owner_password, key = self._auth_user_password(prp_userpass)
        if owner_password:
            logger.debug("Authenticated with the owner password")
            return AuthResult(AuthStatus.OWNER), key

        # next, check the user password
        user_password, key = self._auth_user_password(pw_bytes)
        if user_password:
            logger.debug("Authenticated with the user password")
            return AuthResult(
                AuthStatus.USER,
                permission_flags=self.encrypt_dict.permissions
            ), key
        logger.warning(
            "Password does not match the owner or user password of the "
            "document; decrypted data will most likely be garbage."
        )
        return AuthResult(AuthStatus.FAILED), None

    def get_file_encryption_key(self) -> bytes:
        """
        Retrieve the (global) file encryption key for this security handler.

        :return:
            The file encryption key as a :class:`bytes` object.
        """
        return self._shared_key

    def derive_object_key(self, ref: generic.Reference,
                          is_stream: bool = False) -> bytes:
        """
        Derive the local key for the given object ID and generation number.

        :param ref:
            Reference to the object being decrypted.
        :param is_stream:
            Derive the key for stream data instead of string data. This only
            matters if exactly one of the two uses AES.
        :return:
            The local key.
        """
        use_aes = self.leaf_cipher(is_stream).kind == CipherKind.BLOCK_CHAINED
        return legacy_derive_object_key(
            self._shared_key, ref.idnum, ref.generation, use_aes=use_aes
        )

    def decrypt_leaf(self, data: bytes, ref: generic.Reference,
                     local_key: Optional[bytes] = None,
                     is_stream: bool = False) -> bytes:
        """
        Decrypt the raw content of a string or stream.

        :param data:
            The encrypted bytes.
        :param ref:
            Reference to the object containing the string or stream.
        :param local_key:
            The object key for ``ref``, if it was already computed.
        :param is_stream:
            ``True`` if ``data`` is the payload of a stream, ``False`` if it is
            the content of a string.
        :return:
            The decrypted bytes.
        :raise UnsupportedCipherError:
            Raised if the relevant crypt filter uses AES.
        """
        cipher = self.leaf_cipher(is_stream)
        if cipher.kind == CipherKind.IDENTITY:
            return data
        if local_key is None:
            local_key = self.derive_object_key(ref, is_stream=is_stream)
        return cipher.decrypt(local_key, data)
