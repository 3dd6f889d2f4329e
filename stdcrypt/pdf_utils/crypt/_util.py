import struct

from Crypto.Cipher import ARC4 as _VariableKeyARC4
from cryptography.hazmat.decrepit.ciphers.algorithms import ARC4
from cryptography.hazmat.primitives.ciphers import Cipher


def as_signed(val: int):
    # converts an integer to a signed int
    return struct.unpack('<i', struct.pack('<I', val & 0xffffffff))[0]


def as_unsigned(val: int):
    return val & 0xffffffff


def rc4_encrypt(key, data):
    # cryptography only accepts a handful of RC4 key sizes, while object keys
    # can be anywhere between 10 and 16 bytes long
    if len(key) * 8 not in ARC4.key_sizes:
        return _VariableKeyARC4.new(key).encrypt(data)
    cipher = Cipher(ARC4(key), mode=None)
    encryptor = cipher.encryptor()
    return encryptor.update(data) + encryptor.finalize()  # lgtm
