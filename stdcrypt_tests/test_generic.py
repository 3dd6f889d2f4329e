import logging

import pytest

from stdcrypt.pdf_utils import generic
from stdcrypt.pdf_utils.generic import pdf_name


def test_reference_value_semantics():
    ref = generic.Reference(5, 0)
    assert ref == generic.Reference(5)
    assert hash(ref) == hash(generic.Reference(5, 0))
    assert ref != generic.Reference(5, 1)
    assert str(ref) == '5 0 R'
    assert len({ref, generic.Reference(5, 0), generic.Reference(6, 0)}) == 2


@pytest.mark.parametrize('idnum,generation', [(-1, 0), (1, -1)])
def test_reference_negative(idnum, generation):
    with pytest.raises(ValueError):
        generic.Reference(idnum, generation)


def test_reference_out_of_range_warns(caplog):
    with caplog.at_level(logging.WARNING):
        generic.Reference(0x1000000, 0)
    assert 'out of range' in caplog.text


def test_indirect_object():
    ind = generic.IndirectObject(3, 1)
    assert ind.idnum == 3
    assert ind.generation == 1
    assert ind == generic.IndirectObject(3, 1)
    assert ind != generic.IndirectObject(3, 0)


def test_name_object():
    assert pdf_name('/Type') == '/Type'
    with pytest.raises(ValueError):
        pdf_name('Type')


def test_text_string_original_bytes():
    s = generic.TextStringObject('caf\xe9\x00')
    assert s.original_bytes == b'caf\xe9\x00'


def test_pdf_string_preserves_kind():
    text = generic.TextStringObject('abc')
    raw = generic.ByteStringObject(b'abc')
    from_text = generic.pdf_string(b'\xff\x01', like=text)
    from_raw = generic.pdf_string(b'\xff\x01', like=raw)
    assert isinstance(from_text, generic.TextStringObject)
    assert from_text.original_bytes == b'\xff\x01'
    assert isinstance(from_raw, generic.ByteStringObject)
    assert from_raw.original_bytes == b'\xff\x01'
    assert isinstance(generic.pdf_string(b'x'), generic.ByteStringObject)


def test_boolean_and_null():
    assert not generic.BooleanObject(False)
    assert generic.BooleanObject(True) == True  # noqa: E712
    assert generic.NullObject() == generic.NullObject()
    assert not generic.NullObject()


def test_dictionary_keys_are_names():
    d = generic.DictionaryObject({'/A': generic.NumberObject(1)})
    key, = d.keys()
    assert isinstance(key, generic.NameObject)
    with pytest.raises(ValueError):
        d['/B'] = 1
    with pytest.raises(ValueError):
        d[1] = generic.NumberObject(1)


def test_dictionary_get_name():
    d = generic.DictionaryObject({
        '/Type': pdf_name('/Sig'),
        '/Subtype': generic.TextStringObject('/Sig'),
    })
    assert d.get_name('/Type') == '/Sig'
    assert d.get_name('/Subtype') is None
    assert d.get_name('/Missing') is None


def test_dictionary_with_entry_copies():
    d = generic.DictionaryObject({'/A': generic.NumberObject(1)})
    d2 = d.with_entry('/A', generic.NumberObject(2))
    assert d['/A'] == 1
    assert d2['/A'] == 2
    assert type(d2) is generic.DictionaryObject


def test_dictionary_get_and_apply():
    d = generic.DictionaryObject({'/A': generic.NumberObject(1)})
    assert d.get_and_apply('/A', lambda x: x + 1) == 2
    assert d.get_and_apply('/B', lambda x: x + 1, default=0) == 0


class _CustomStream(generic.StreamObject):
    pass


def test_stream_with_content():
    stream = _CustomStream({'/Length': generic.NumberObject(3)}, b'abc')
    new_stream = stream.with_content(
        {'/Length': generic.NumberObject(4)}, b'abcd'
    )
    assert isinstance(new_stream, _CustomStream)
    assert new_stream.encoded_data == b'abcd'
    assert new_stream['/Length'] == 4
    assert stream.encoded_data == b'abc'
    assert stream['/Length'] == 3


def test_stream_with_entry():
    stream = generic.StreamObject({'/Length': generic.NumberObject(3)}, b'abc')
    new_stream = stream.with_entry('/Type', pdf_name('/XObject'))
    assert isinstance(new_stream, generic.StreamObject)
    assert new_stream.encoded_data == b'abc'
    assert '/Type' not in stream


def test_stream_equality():
    s1 = generic.StreamObject({'/Length': generic.NumberObject(3)}, b'abc')
    s2 = generic.StreamObject({'/Length': generic.NumberObject(3)}, b'abc')
    s3 = generic.StreamObject({'/Length': generic.NumberObject(3)}, b'abd')
    assert s1 == s2
    assert s1 != s3
    assert s1 != generic.DictionaryObject(s1)
