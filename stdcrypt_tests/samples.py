from dataclasses import dataclass

from stdcrypt.pdf_utils import generic
from stdcrypt.pdf_utils.crypt import (
    EncryptionDictionary,
    SecurityHandlerVersion,
    StandardSecurityHandler,
)
from stdcrypt.pdf_utils.crypt._util import rc4_encrypt

OWNER_ENTRY = bytes.fromhex(
    '4e58a9c4c6b3d0b0ad7ac2afd19ebd5d0d4e8e4c7d1e6a2b6f4f1c7f9e0d1a2b'
)
DOC_ID = bytes.fromhex('0123456789abcdeffedcba9876543210')
PERMISSIONS = -4


def rc4_encrypt_dict(revision=3, keylen_bits=128, **kwargs):
    if revision == 2:
        kwargs.setdefault('version', SecurityHandlerVersion.RC4_40)
        keylen_bits = 40
    else:
        kwargs.setdefault('version', SecurityHandlerVersion.RC4_LONGER_KEYS)
    return EncryptionDictionary(
        revision=revision,
        owner_check_value=OWNER_ENTRY,
        permissions=PERMISSIONS,
        keylen_bits=keylen_bits,
        **kwargs,
    )


def v4_encrypt_dict(stream_method, string_method=None, **kwargs):
    if string_method is None:
        string_method = stream_method
    return rc4_encrypt_dict(
        revision=4, version=SecurityHandlerVersion.RC4_OR_AES128,
        stream_filter_method=stream_method,
        string_filter_method=string_method, **kwargs
    )


def rc4_handler(password='', **kwargs) -> StandardSecurityHandler:
    return StandardSecurityHandler(
        rc4_encrypt_dict(**kwargs), document_id=DOC_ID, password=password
    )


def encrypt_for(handler: StandardSecurityHandler, ref: generic.Reference,
                data: bytes) -> bytes:
    return rc4_encrypt(handler.derive_object_key(ref), data)


@dataclass(frozen=True)
class EncryptedFileSample:
    """
    Encryption parameters of a password-protected file, together with one
    encrypted string and the values a correct implementation must produce.
    """

    revision: int
    version: int
    keylen_bits: int
    permissions: int
    owner_entry: str
    user_entry: str
    doc_id: str
    user_password: str
    owner_password: str
    file_key: str
    ref: generic.Reference
    ciphertext: str
    plaintext: bytes

    def encrypt_dict(self) -> generic.DictionaryObject:
        return generic.DictionaryObject({
            '/Filter': generic.NameObject('/Standard'),
            '/V': generic.NumberObject(self.version),
            '/R': generic.NumberObject(self.revision),
            '/Length': generic.NumberObject(self.keylen_bits),
            '/P': generic.NumberObject(self.permissions),
            '/O': generic.ByteStringObject(bytes.fromhex(self.owner_entry)),
            '/U': generic.ByteStringObject(bytes.fromhex(self.user_entry)),
        })

    def trailer(self) -> generic.DictionaryObject:
        doc_id = generic.ByteStringObject(bytes.fromhex(self.doc_id))
        return generic.DictionaryObject({
            '/Encrypt': self.encrypt_dict(),
            '/ID': generic.ArrayObject([doc_id, doc_id]),
        })


# RC4-128, revision 3, taken from the encryption dictionary of a real file
# (used in pdf.js's test suite).
R3_128_SAMPLE = EncryptedFileSample(
    revision=3, version=2, keylen_bits=128, permissions=-1028,
    owner_entry=(
        '80c30496916f20736c3ae61b135491f20d5612e3ff5ebbe9564fd86b9aca7c5d'
    ),
    user_entry=(
        '6a0c8d3e591900bc6a647d91bdaa001800000000000000000000000000000000'
    ),
    doc_id='f6c6af17f372528d524d9a80d1efdf18',
    user_password='123456', owner_password='654321',
    file_key='4e3bcf7b7cdd332d047259a3606132de',
    ref=generic.Reference(7, 0),
    ciphertext='e421cc400aca582c7b12aac900ebb84f',
    plaintext=b'Quarterly report',
)

# RC4-40, revision 2, user password 'u', owner password 'o'
R2_40_SAMPLE = EncryptedFileSample(
    revision=2, version=1, keylen_bits=40, permissions=-44,
    owner_entry=(
        '853fee3f6550fc3bc212797eaed99cc9be53347583a738e25fdfb1242bf93366'
    ),
    user_entry=(
        '2112dfd8c2396c718e695f4dc8d4d49deb0c6bc5231a6bb0120873716d6365f0'
    ),
    doc_id='5f3a9c0e71b24d68a2c4e6f80193b5d7',
    user_password='u', owner_password='o',
    file_key='54e0a05c4b',
    ref=generic.Reference(3, 0),
    ciphertext='e3f0ce32ca70086322b2155fac74cc',
    plaintext=b'Annual accounts',
)

ENCRYPTED_FILE_SAMPLES = [R2_40_SAMPLE, R3_128_SAMPLE]
