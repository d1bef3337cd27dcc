import pytest

from bitops import BitWriter, BitReader, pack_bits, pack_codes, unpack_bits


def test_bitwriter_write_bits_and_flush_basic():
    bw = BitWriter()
    bw.write_bits(0b1010, 4)
    bw.write_bits(0b11110000, 8)
    assert bw.bit_length == 12
    out = bw.flush()
    assert isinstance(out, (bytes, bytearray))
    assert len(out) == 2
    assert out[0] == 0b10101111
    assert out[1] == 0b00000000


def test_bitwriter_write_code():
    bw = BitWriter()
    bw.write_code("1")
    bw.write_code("101")
    assert bw.bit_length == 4
    assert bw.flush() == bytes([0b11010000])


def test_bitwriter_write_code_rejects_garbage():
    bw = BitWriter()
    with pytest.raises(ValueError):
        bw.write_code("102")


def test_bitreader_read_bits_and_code():
    data = bytes([0b11001010, 0xFF])
    br = BitReader(data)
    assert br.read_bits(3) == 0b110
    assert br.bits_remaining == 13
    assert br.read_code(5) == "01010"
    assert br.read_bit() == 1
    assert br.bits_remaining == 7


def test_bitreader_eoferror_on_insufficient_bits():
    br = BitReader(b"\xF0")
    with pytest.raises(EOFError):
        _ = br.read_bits(9)


def test_write_zero_bits_is_noop_and_flush_padding():
    bw = BitWriter()
    bw.write_bits(0xAA, 8)
    bw.write_bits(0, 0)
    out = bw.flush()
    assert out == bytes([0xAA])


def test_pack_codes_reports_exact_bit_count():
    packed, nbits = pack_codes(["1", "1", "1", "00", "01"])
    assert nbits == 7
    assert packed == bytes([0b11100010])


@pytest.mark.parametrize("nbits", [0, 1, 7, 8, 9, 15, 16, 17])
def test_pack_bits_length_is_ceil(nbits):
    bits = "1" * nbits
    assert len(pack_bits(bits)) == (nbits + 7) // 8


def test_pack_bits_msb_first_and_padding():
    assert pack_bits("1") == b"\x80"
    assert pack_bits("000000011") == b"\x01\x80"
    with pytest.raises(ValueError):
        pack_bits("01x")


def test_unpack_bits():
    assert unpack_bits(b"") == ""
    assert unpack_bits(bytes([0b10000001, 0x0F])) == "1000000100001111"
