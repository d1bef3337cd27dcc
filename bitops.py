from typing import Iterable, Tuple


class BitWriter:
    """Bit-packing writer.

    Accumulates individual bits into bytes, most-significant bit first,
    and buffers them until flushed.

    :ivar buffer: Internal byte buffer holding fully written bytes.
    :type buffer: bytearray
    :ivar bit_buffer: 8-bit scratch register for accumulating pending bits.
    :type bit_buffer: int
    :ivar bit_count: Number of valid bits currently stored in ``bit_buffer`` (0-7).
    :type bit_count: int
    """

    def __init__(self):
        """Initialize an empty bit writer.

        :returns: None
        :rtype: None
        """
        self.buffer = bytearray()
        self.bit_buffer = 0
        self.bit_count = 0

    @property
    def bit_length(self) -> int:
        """Number of bits written so far, padding excluded."""
        return len(self.buffer) * 8 + self.bit_count

    def _push(self, bit: int):
        self.bit_buffer = (self.bit_buffer << 1) | bit
        self.bit_count += 1
        if self.bit_count == 8:
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0

    def write_bits(self, value: int, nbits: int):
        """Write the lowest ``nbits`` of ``value`` to the buffer, MSB first.

        :param value: Integer whose bits will be written.
        :type value: int
        :param nbits: Number of bits from ``value`` to write.
        :type nbits: int
        :returns: None
        :rtype: None
        """
        for i in range(nbits - 1, -1, -1):
            self._push((value >> i) & 1)

    def write_code(self, code: str):
        """Write a code given as a string of ``'0'``/``'1'`` characters.

        :param code: Code string.
        :type code: str
        :returns: None
        :rtype: None
        :raises ValueError: If ``code`` holds anything besides ``0`` and ``1``.
        """
        for ch in code:
            if ch == "0":
                self._push(0)
            elif ch == "1":
                self._push(1)
            else:
                raise ValueError(f"Invalid bit character: {ch!r}")

    def flush(self) -> bytes:
        """Flush remaining bits (if any) and return the full byte buffer.

        Any partial byte in ``bit_buffer`` is padded with zeros to complete the
        byte before being appended.

        :returns: The accumulated bytes written so far.
        :rtype: bytes
        """
        if self.bit_count > 0:
            self.bit_buffer <<= (8 - self.bit_count)
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0
        return bytes(self.buffer)


class BitReader:
    """Bit reader over a bytes-like object, MSB first.

    :ivar data: Input data to read bits from.
    :type data: bytes
    :ivar pos: Current position in ``data`` (byte index).
    :type pos: int
    :ivar bit_buffer: Scratch register holding the current source byte.
    :type bit_buffer: int
    :ivar bit_count: Number of unread bits remaining in ``bit_buffer`` (0-8).
    :type bit_count: int
    """

    def __init__(self, data: bytes):
        """Create a bit reader for the given input ``data``.

        :param data: Source data to read from.
        :type data: bytes
        :returns: None
        :rtype: None
        """
        self.data = data
        self.pos = 0
        self.bit_buffer = 0
        self.bit_count = 0

    @property
    def bits_remaining(self) -> int:
        return (len(self.data) - self.pos) * 8 + self.bit_count

    def read_bit(self) -> int:
        """Read a single bit.

        :returns: ``0`` or ``1``.
        :rtype: int
        :raises EOFError: If no bits are left.
        """
        if self.bit_count == 0:
            if self.pos >= len(self.data):
                raise EOFError("Unexpected end of data")
            self.bit_buffer = self.data[self.pos]
            self.pos += 1
            self.bit_count = 8
        self.bit_count -= 1
        return (self.bit_buffer >> self.bit_count) & 1

    def read_bits(self, nbits: int) -> int:
        """Read ``nbits`` bits from the stream and return them as an integer.

        :param nbits: Number of bits to read.
        :type nbits: int
        :returns: The integer value composed of the next ``nbits`` bits.
        :rtype: int
        :raises EOFError: If the end of data is reached before reading ``nbits``.
        """
        result = 0
        for _ in range(nbits):
            result = (result << 1) | self.read_bit()
        return result

    def read_code(self, nbits: int) -> str:
        """Read ``nbits`` bits as a ``'0'``/``'1'`` string.

        :param nbits: Number of bits to read.
        :type nbits: int
        :returns: Code string of length ``nbits``.
        :rtype: str
        :raises EOFError: If the end of data is reached first.
        """
        return "".join("1" if self.read_bit() else "0" for _ in range(nbits))


def pack_bits(bits: str) -> bytes:
    """Pack a ``'0'``/``'1'`` string into bytes, MSB first.

    The string is cut into 8-bit groups; a short final group is padded
    with zero bits on the right.

    :param bits: Bit string.
    :type bits: str
    :returns: ``ceil(len(bits) / 8)`` bytes.
    :rtype: bytes
    :raises ValueError: If ``bits`` holds anything besides ``0`` and ``1``.
    """
    if bits.strip("01"):
        raise ValueError("Bit string may only contain '0' and '1'")
    out = bytearray()
    for i in range(0, len(bits), 8):
        group = bits[i:i + 8]
        out.append(int(group.ljust(8, "0"), 2))
    return bytes(out)


def pack_codes(codes: Iterable[str]) -> Tuple[bytes, int]:
    """Concatenate codes in order and pack them into bytes.

    :param codes: Code strings, one per input symbol, in stream order.
    :type codes: Iterable[str]
    :returns: Tuple ``(packed, bit_count)`` where ``bit_count`` is the exact
        number of meaningful bits in ``packed``.
    :rtype: Tuple[bytes, int]
    """
    writer = BitWriter()
    for code in codes:
        writer.write_code(code)
    bit_count = writer.bit_length
    return writer.flush(), bit_count


def unpack_bits(data: bytes) -> str:
    """Expand bytes into a ``'0'``/``'1'`` string, MSB first per byte."""
    return "".join(format(byte, "08b") for byte in data)
