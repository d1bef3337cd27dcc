import struct

import pytest

from codetable import (
    BinaryCodeTableCodec,
    Sidecar,
    TextCodeTableCodec,
    load_sidecar,
    sidecar_path,
)
from errors import AmbiguousCodeTableError, CodeTableFormatError
from huffman import HuffmanCoder


CODES = {10: "00", ord("b"): "01", ord("a"): "1"}


def test_sidecar_path():
    assert sidecar_path("out.bin") == "out.bin.huff"


def test_text_dumps_matches_line_format():
    out = TextCodeTableCodec.dumps(Sidecar(CODES))
    assert out == b"\\n:00\na:1\nb:01\n"


def test_text_dumps_metadata_lines():
    out = TextCodeTableCodec.dumps(Sidecar(CODES, bit_count=5, checksum=0xBEEF))
    lines = out.split(b"\n")
    assert lines[0] == b"\\bits:5"
    assert lines[1] == b"\\crc32:0000beef"


def test_text_roundtrip_with_newline_escape():
    sidecar = Sidecar(CODES, bit_count=5, checksum=123)
    assert TextCodeTableCodec.loads(TextCodeTableCodec.dumps(sidecar)) == sidecar


def test_text_loads_legacy_table_in_any_order():
    legacy = b"a:1\n\\n:00\nb:01\n"
    table = TextCodeTableCodec.loads(legacy)
    assert table.codes == CODES
    assert table.bit_count is None
    assert table.checksum is None


def test_text_handles_backslash_and_carriage_return_symbols():
    codes = {ord("\\"): "0", 13: "10", 10: "11"}
    out = TextCodeTableCodec.dumps(Sidecar(codes))
    assert TextCodeTableCodec.loads(out).codes == codes


def test_text_refuses_colon_symbol():
    with pytest.raises(AmbiguousCodeTableError):
        TextCodeTableCodec.dumps(Sidecar({ord(":"): "0", ord("a"): "1"}))


@pytest.mark.parametrize(
    "bad",
    [
        b"a01\n",  # no delimiter
        b"::0\na:1\n",  # ambiguous colon entry
        b"ab:0\n",  # multi-byte token
        b"a:\n",  # empty code
        b"a:012\n",  # not binary
        b"a:0\na:1\n",  # duplicate symbol
        b"a:0\nb:0\n",  # duplicate code
        b"a:0\nb:01\n",  # not prefix-free
        b"\\bits:x\na:0\n",
        b"\\crc32:zz\na:0\n",
    ],
)
def test_text_loads_rejects_malformed(bad):
    with pytest.raises(CodeTableFormatError):
        TextCodeTableCodec.loads(bad)


def test_binary_roundtrip_all_symbols():
    codes = HuffmanCoder().build_from_data(bytes(range(256)) * 2 + b"::::")
    sidecar = Sidecar(codes, bit_count=4321, checksum=0xDEADBEEF)
    data = BinaryCodeTableCodec.dumps(sidecar)
    assert data.startswith(BinaryCodeTableCodec.SIGNATURE)
    assert BinaryCodeTableCodec.loads(data) == sidecar


def test_binary_layout():
    data = BinaryCodeTableCodec.dumps(Sidecar({ord("a"): "1", 10: "0"}, 1, 7))
    header = struct.pack("<4sBQIH", b"HUFT", 1, 1, 7, 2)
    assert data[:len(header)] == header
    # records sorted by symbol: newline then 'a', one code byte each
    assert data[len(header):] == b"\x0a\x01\x00\x00" + b"\x61\x01\x00\x80"


def test_binary_requires_metadata():
    with pytest.raises(CodeTableFormatError):
        BinaryCodeTableCodec.dumps(Sidecar(CODES))


def test_binary_rejects_bad_header():
    good = BinaryCodeTableCodec.dumps(Sidecar(CODES, 5, 0))
    with pytest.raises(CodeTableFormatError):
        BinaryCodeTableCodec.loads(b"NOPE" + good[4:])
    with pytest.raises(CodeTableFormatError):
        BinaryCodeTableCodec.loads(good[:4] + b"\x63" + good[5:])
    with pytest.raises(CodeTableFormatError):
        BinaryCodeTableCodec.loads(good[:10])


def test_binary_rejects_truncated_and_trailing():
    good = BinaryCodeTableCodec.dumps(Sidecar(CODES, 5, 0))
    with pytest.raises(CodeTableFormatError):
        BinaryCodeTableCodec.loads(good[:-1])
    with pytest.raises(CodeTableFormatError):
        BinaryCodeTableCodec.loads(good + b"\x00")


def test_binary_rejects_zero_length_code():
    data = struct.pack("<4sBQIH", b"HUFT", 1, 0, 0, 1) + struct.pack("<BH", 65, 0)
    with pytest.raises(CodeTableFormatError):
        BinaryCodeTableCodec.loads(data)


def test_load_sidecar_detects_format():
    sidecar = Sidecar(CODES, 5, 99)
    assert load_sidecar(BinaryCodeTableCodec.dumps(sidecar)) == sidecar
    assert load_sidecar(TextCodeTableCodec.dumps(sidecar)) == sidecar
