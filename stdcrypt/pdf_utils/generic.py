"""
Implementation of the PDF object types consumed and produced by the
decryption routines.

Objects are handed to this library already parsed, one indirect object at a
time. Decryption never mutates these objects: containers are rebuilt
(see :meth:`.DictionaryObject.with_entry` and
:meth:`.StreamObject.with_content`) so that sub-trees shared between several
parents are left untouched.
"""
import decimal
import logging
from dataclasses import dataclass
from typing import Optional, Union

__all__ = [
    'Reference',
    'PdfObject',
    'IndirectObject',
    'NullObject',
    'BooleanObject',
    'FloatObject',
    'NumberObject',
    'ByteStringObject',
    'TextStringObject',
    'NameObject',
    'ArrayObject',
    'DictionaryObject',
    'StreamObject',
    'pdf_name',
    'pdf_string',
]

logger = logging.getLogger(__name__)

MAX_OBJECT_NUMBER = 0xFFFFFF
MAX_GENERATION = 0xFFFF


@dataclass(frozen=True)
class Reference:
    """
    A reference to an object with a certain ID and generation number.

    Only the low-order three bytes of the object ID and the low-order two
    bytes of the generation number take part in key derivation. Larger values
    are tolerated (with a warning) since some producers emit them anyway,
    but negative values are rejected.

    .. warning::
       Contrary to what one might expect, the generation number does *not*
       indicate the document revision in which the object was modified.
    """

    idnum: int
    """
    The object's ID.
    """

    generation: int = 0
    """
    The object's generation number (usually `0`)
    """

    def __post_init__(self):
        if self.idnum < 0 or self.generation < 0:
            raise ValueError(
                f"Object ID and generation must be non-negative, not "
                f"{self.idnum} {self.generation}"
            )
        if self.idnum > MAX_OBJECT_NUMBER or self.generation > MAX_GENERATION:
            logger.warning(
                f"Reference {self.idnum} {self.generation} R is out of range; "
                f"only the low-order bytes will be used for key derivation."
            )

    def __str__(self):
        return f"{self.idnum} {self.generation} R"


class PdfObject:
    """Superclass for all PDF objects."""

    def get_object(self):
        """Resolves indirect references.

        :return: `self`, unless an instance of :class:`.IndirectObject`.
        """
        return self


class NullObject(PdfObject):
    """
    PDF `null` object.

    All instances are treated as equal and falsy.
    """

    def __eq__(self, other):
        return self is other or isinstance(other, NullObject)

    def __hash__(self):
        return hash(None)

    def __bool__(self):
        return False

    def __repr__(self):
        return 'NullObject()'


class BooleanObject(PdfObject):
    """PDF boolean value."""

    def __init__(self, value):
        self.value = value

    def __bool__(self):
        return bool(self.value)

    def __eq__(self, other):
        return isinstance(other, (BooleanObject, bool)) and \
            bool(self) == bool(other)

    def __hash__(self):
        return hash(bool(self))

    def __str__(self):
        return str(bool(self))

    def __repr__(self):
        return str(self)


class IndirectObject(PdfObject):
    """
    Thin wrapper around a :class:`.Reference` occurring as a value inside
    another object.

    The decryption routines never resolve these: the object they point to
    is decrypted separately, under its own object ID.
    """

    def __init__(self, idnum, generation):
        self.reference = Reference(idnum, generation)

    @property
    def idnum(self) -> int:
        """
        :return: the object ID of this reference.
        """
        return self.reference.idnum

    @property
    def generation(self):
        """
        :return: the generation number of this reference.
        """
        return self.reference.generation

    def __repr__(self):
        return "IndirectObject(%r, %r)" % (self.idnum, self.generation)

    def __hash__(self):
        return hash((self.idnum, self.generation))

    def __eq__(self, other):
        return (
            other is not None
            and isinstance(other, IndirectObject)
            and self.reference == other.reference
        )


class FloatObject(decimal.Decimal, PdfObject):
    """
    PDF Float object.

    Internally, these are treated as decimals (and therefore actually
    fixed-point objects, to be precise).
    """

    # noinspection PyArgumentList,PyTypeChecker
    def __new__(cls, value="0", context=None):
        try:
            return decimal.Decimal.__new__(cls, str(value), context)
        except (ValueError, decimal.DecimalException):
            return decimal.Decimal.__new__(cls, str(value))

    def __repr__(self):
        if self == self.to_integral():
            return str(self.quantize(decimal.Decimal(1)))
        else:
            return str(self)

    def as_numeric(self):
        """
        :return: a Python ``float`` value for this object.
        """
        return float(self)


class NumberObject(int, PdfObject):
    """
    PDF number object. This is the PDF type for integer values.
    """

    # noinspection PyArgumentList
    def __new__(cls, value):
        return int.__new__(cls, int(value))

    def as_numeric(self):
        """
        :return: a Python ``int`` value for this object.
        """
        return int(self)


class ByteStringObject(bytes, PdfObject):
    """PDF bytestring class."""

    original_bytes = property(lambda self: bytes(self))
    """
    For compatibility with :attr:`.TextStringObject.original_bytes`
    """


class TextStringObject(str, PdfObject):
    """
    PDF string object holding its content as a Python string.

    Each character stands for exactly one byte of the string as it appears
    in the file (i.e. the character codes are the byte values).
    Interpreting the content as actual text (PDFDocEncoding, UTF-16BE, ...)
    is left to higher-level code, after decryption.
    """

    @property
    def original_bytes(self) -> bytes:
        """
        Retrieve the raw bytes of this string.

        :raise UnicodeEncodeError:
            Raised if the string contains characters outside the single-byte
            range, which cannot occur in strings produced by a PDF parser.
        """
        return self.encode('latin-1')


def pdf_string(
        data: Union[bytes, bytearray], like: Optional[PdfObject] = None) \
        -> Union[ByteStringObject, TextStringObject]:
    """
    Wrap raw string bytes in a PDF string object.

    :param data:
        The bytes making up the string.
    :param like:
        A string object whose kind should be preserved. If this is a
        :class:`.TextStringObject`, the result maps every byte to the
        character with the same code; otherwise, the result is a
        :class:`.ByteStringObject`.
    """
    if isinstance(like, TextStringObject):
        return TextStringObject(bytes(data).decode('latin-1'))
    return ByteStringObject(data)


class NameObject(str, PdfObject):
    """
    PDF name object. These are valid Python strings, but names and strings
    are treated differently in the PDF specification, so proper care is
    required.
    """

    def __new__(cls, value):
        if not value.startswith('/'):
            raise ValueError(f"Name objects must start with /, not {value!r}")
        return str.__new__(cls, value)


pdf_name = NameObject


def _normalise_key(key):
    if not isinstance(key, NameObject):
        if isinstance(key, str):
            return NameObject(key)
        else:
            raise ValueError("key must be PdfName")
    return key


class ArrayObject(list, PdfObject):
    """
    PDF array object. This class extends from Python's list class,
    and supports its interface.
    """
    pass


class DictionaryObject(dict, PdfObject):
    """
    A PDF dictionary object.

    Keys in a PDF dictionary are PDF names, and values are PDF objects.
    """

    def __init__(self, dict_data=None):
        if dict_data is not None:
            super().__init__(
                {_normalise_key(k): v for k, v in dict_data.items()}
            )
        else:
            super().__init__()

    def __setitem__(self, key, value):
        key = _normalise_key(key)
        if not isinstance(value, PdfObject):
            raise ValueError("value must be PdfObject")
        return dict.__setitem__(self, key, value)

    def get_and_apply(self, key, function, *, default=None):
        try:
            value = self[key]
        except KeyError:
            return default
        return function(value)

    def get_name(self, key) -> Optional[NameObject]:
        """
        Look up a key, and return its value only if it is a name.

        :param key:
            Key to look up in the dictionary.
        :return:
            A :class:`.NameObject`, or ``None`` if the key is absent or its
            value is not a name.
        """
        value = self.get(key)
        return value if isinstance(value, NameObject) else None

    def with_entry(self, key, value) -> 'DictionaryObject':
        """
        Return a copy of this dictionary with one entry replaced.
        The original dictionary is not modified.

        :param key:
            Key to replace (or add).
        :param value:
            New value for the key.
        :return:
            A new :class:`.DictionaryObject`.
        """
        result = DictionaryObject(self)
        result[key] = value
        return result


class StreamObject(DictionaryObject):
    """
    PDF stream object.

    Essentially, a PDF stream is a dictionary object with a binary blob of
    data attached. The decryption routines only ever look at the raw
    (encoded) payload, so no filters are applied here.

    :param dict_data:
        The dictionary data for this stream object.
    :param encoded_data:
        The raw stream data, as it appears in the file.
    """

    def __init__(self, dict_data: Optional[dict] = None,
                 encoded_data: bytes = b''):
        super().__init__(dict_data)
        self._encoded_data = bytes(encoded_data)

    @property
    def encoded_data(self) -> bytes:
        """
        Return the raw stream data as bytes.
        """
        return self._encoded_data

    def with_content(self, dict_data: dict, encoded_data: bytes) \
            -> 'StreamObject':
        """
        Build a new stream of the same class, with the given dictionary
        entries and payload. The original stream is not modified.
        """
        return self.__class__(dict_data, encoded_data=encoded_data)

    def with_entry(self, key, value) -> 'StreamObject':
        result = self.with_content(self, self._encoded_data)
        result[key] = value
        return result

    def __eq__(self, other):
        return (
            isinstance(other, StreamObject)
            and dict.__eq__(self, other)
            and self._encoded_data == other._encoded_data
        )

    def __ne__(self, other):
        return not self.__eq__(other)

    __hash__ = None
