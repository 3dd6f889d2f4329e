import logging
import threading
from typing import FrozenSet, Optional, Union

from stdcrypt.pdf_utils import generic

from .api import AuthResult
from .settings import DecryptionSettings
from .standard import EncryptionDictionary, StandardSecurityHandler
from .traversal import ObjectTreeDecryptor

__all__ = ['DecryptionSession']

logger = logging.getLogger(__name__)


def _document_id_from_trailer(trailer: generic.DictionaryObject) -> bytes:
    id_array = trailer.get('/ID')
    if isinstance(id_array, generic.ArrayObject) and len(id_array) == 2:
        try:
            return id_array[0].original_bytes
        except AttributeError:
            logger.warning("First element of /ID is not a string; ignoring.")
    return b''


class DecryptionSession:
    """
    Decrypts the objects of a single document.

    The file encryption key is derived once, when the session is created.
    After that, :meth:`decrypt` can be called any number of times, from
    several threads if need be.

    :param encrypt_dict:
        The document's encryption dictionary, or ``None`` if the document
        is not encrypted.
    :param document_id:
        The first element of the document's ``/ID`` array, or ``b''``.
    :param password:
        The password to decrypt the document with.
    :param settings:
        Decryption settings.
    :raise UnsupportedRevisionError:
        Raised if the document uses a security handler revision other than
        2, 3 or 4.
    """

    def __init__(self, encrypt_dict: Optional[EncryptionDictionary],
                 document_id: bytes = b'',
                 password: Union[str, bytes, None] = None,
                 settings: Optional[DecryptionSettings] = None):
        settings = settings or DecryptionSettings()
        self.settings = settings
        self._handler: Optional[StandardSecurityHandler] = None
        self._decryptor: Optional[ObjectTreeDecryptor] = None
        if encrypt_dict is not None:
            self._handler = StandardSecurityHandler(
                encrypt_dict, document_id=document_id, password=password,
                settings=settings
            )
            self._decryptor = ObjectTreeDecryptor(
                self._handler, max_depth=settings.max_nesting_depth
            )
        self._decrypted = set()
        self._lock = threading.Lock()

    @classmethod
    def from_trailer(cls, trailer: generic.DictionaryObject,
                     password: Union[str, bytes, None] = None,
                     settings: Optional[DecryptionSettings] = None) \
            -> 'DecryptionSession':
        """
        Set up a session from a document's trailer dictionary.

        :param trailer:
            The trailer dictionary. Its ``/Encrypt`` entry, if present, must
            already be resolved to a dictionary.
        :param password:
            The password to decrypt the document with.
        :param settings:
            Decryption settings.
        :return:
            A :class:`.DecryptionSession`.
        """
        encrypt_dict_obj = trailer.get('/Encrypt')
        if encrypt_dict_obj is None:
            encrypt_dict = None
        elif isinstance(encrypt_dict_obj, generic.DictionaryObject):
            encrypt_dict = EncryptionDictionary.from_pdf_object(
                encrypt_dict_obj
            )
        else:
            raise ValueError(
                "The /Encrypt entry must be resolved before setting up "
                "a decryption session."
            )
        return cls(
            encrypt_dict, document_id=_document_id_from_trailer(trailer),
            password=password, settings=settings
        )

    @property
    def handler(self) -> Optional[StandardSecurityHandler]:
        """
        The security handler, or ``None`` if the document is not encrypted.
        """
        return self._handler

    @property
    def auth_result(self) -> Optional[AuthResult]:
        """
        The result of the password check, or ``None`` if there was none.
        """
        if self._handler is None:
            return None
        return self._handler.auth_result

    @property
    def encrypt_metadata(self) -> bool:
        if self._handler is None:
            return False
        return self._handler.encrypt_metadata

    def decrypt(self, ref: generic.Reference, obj: generic.PdfObject) \
            -> generic.PdfObject:
        """
        Decrypt an indirect object, and record its reference.

        Decrypting the same object again is allowed; it simply starts from
        the object that was passed in.

        :param ref:
            The reference of the indirect object.
        :param obj:
            The object, as parsed from the file.
        :return:
            The decrypted object.
        :raise ValueError:
            Raised if ``obj`` is ``None``.
        """
        if obj is None:
            raise ValueError("Cannot decrypt a missing object")
        if self._decryptor is None:
            result = obj
        else:
            result = self._decryptor.decrypt(ref, obj)
        with self._lock:
            self._decrypted.add(ref)
        return result

    @property
    def decrypted_references(self) -> FrozenSet[generic.Reference]:
        """
        The references of all objects decrypted so far.
        """
        with self._lock:
            return frozenset(self._decrypted)

    def was_decrypted(self, ref: generic.Reference) -> bool:
        with self._lock:
            return ref in self._decrypted
