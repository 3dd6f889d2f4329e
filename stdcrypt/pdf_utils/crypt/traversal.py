"""
Recursive decryption of a single indirect object.

All strings and streams inside an indirect object are encrypted with the same
key, derived from the object's ID and generation number. A handful of
structures are exempt from encryption, and are returned as-is.
"""

import logging
from typing import Dict

from stdcrypt.pdf_utils import generic

from .api import CipherKind, ExcessiveNestingError
from .settings import DEFAULT_MAX_NESTING_DEPTH
from .standard import StandardSecurityHandler

__all__ = ['ObjectTreeDecryptor']

logger = logging.getLogger(__name__)

SIGNATURE_TYPES = frozenset({'/Sig', '/DocTimeStamp'})


class _ObjectWalker:
    # state for a single decrypt() call

    def __init__(self, handler: StandardSecurityHandler,
                 ref: generic.Reference, max_depth: int):
        self.handler = handler
        self.ref = ref
        self.max_depth = max_depth
        # object keys, by whether they were salted for AES
        self._local_keys: Dict[bool, bytes] = {}

    def _decrypt_bytes(self, data: bytes, is_stream: bool = False) -> bytes:
        cipher = self.handler.leaf_cipher(is_stream)
        if cipher.kind == CipherKind.IDENTITY:
            return data
        salted = cipher.kind == CipherKind.BLOCK_CHAINED
        try:
            local_key = self._local_keys[salted]
        except KeyError:
            local_key = self._local_keys[salted] = \
                self.handler.derive_object_key(self.ref, is_stream=is_stream)
        return self.handler.decrypt_leaf(
            data, self.ref, local_key=local_key, is_stream=is_stream
        )

    def visit(self, obj: generic.PdfObject, depth: int):
        if depth > self.max_depth:
            raise ExcessiveNestingError(
                f"Object {self.ref} is nested more than {self.max_depth} "
                f"levels deep."
            )
        if isinstance(obj, generic.StreamObject):
            return self.visit_stream(obj, depth)
        elif isinstance(obj, (generic.ByteStringObject,
                              generic.TextStringObject)):
            return generic.pdf_string(
                self._decrypt_bytes(obj.original_bytes), like=obj
            )
        elif isinstance(obj, generic.DictionaryObject):
            return self.visit_dict(obj, depth)
        elif isinstance(obj, generic.ArrayObject):
            return generic.ArrayObject(
                self.visit(item, depth + 1) for item in obj
            )
        # scalars, references and anything we don't know about
        return obj

    def visit_stream(self, stream: generic.StreamObject, depth: int):
        stream_type = stream.get_name('/Type')
        if stream_type == '/XRef':
            logger.debug(f"Not decrypting cross-reference stream {self.ref}")
            return stream
        if stream_type == '/Metadata' and not self.handler.encrypt_metadata:
            logger.debug(f"Not decrypting metadata stream {self.ref}")
            return stream
        dict_data = self.visit_dict(generic.DictionaryObject(stream), depth)
        payload = self._decrypt_bytes(stream.encoded_data, is_stream=True)
        return stream.with_content(dict_data, payload)

    def visit_dict(self, dictionary: generic.DictionaryObject, depth: int):
        if '/CF' in dictionary:
            logger.debug(
                f"Not decrypting crypt filter dictionary in {self.ref}"
            )
            return dictionary
        skip_contents = dictionary.get_name('/Type') in SIGNATURE_TYPES
        result = dictionary
        for key, value in dictionary.items():
            if skip_contents and key == '/Contents':
                logger.debug(
                    f"Not decrypting signature contents in {self.ref}"
                )
                continue
            if isinstance(value, generic.StreamObject) or not isinstance(
                value, (generic.ByteStringObject, generic.TextStringObject,
                        generic.ArrayObject, generic.DictionaryObject)
            ):
                continue
            result = result.with_entry(key, self.visit(value, depth + 1))
        return result


class ObjectTreeDecryptor:
    """
    Decrypts the strings and streams in an indirect object, producing a new
    object of the same shape. The input is never modified.

    :param handler:
        The security handler of the document.
    :param max_depth:
        Maximal nesting depth of arrays and dictionaries.
    """

    def __init__(self, handler: StandardSecurityHandler,
                 max_depth: int = DEFAULT_MAX_NESTING_DEPTH):
        self.handler = handler
        self.max_depth = max_depth

    def decrypt(self, ref: generic.Reference, obj: generic.PdfObject) \
            -> generic.PdfObject:
        """
        Decrypt an indirect object.

        :param ref:
            The reference of the indirect object; every string and stream
            inside it is decrypted with the key for this reference.
        :param obj:
            The object, as parsed from the file.
        :return:
            The decrypted object. Exempt objects are returned as-is.
        :raise ExcessiveNestingError:
            Raised if the object is nested too deeply.
        :raise UnsupportedCipherError:
            Raised if a string or stream must be decrypted using AES.
        """
        walker = _ObjectWalker(self.handler, ref, self.max_depth)
        try:
            return walker.visit(obj, 0)
        except RecursionError as e:
            raise ExcessiveNestingError(
                f"Object {ref} is nested too deeply to be processed."
            ) from e
