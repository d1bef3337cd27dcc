from typing import Dict, Optional

from bitops import unpack_bits
from errors import TruncatedStreamError, UnknownCodeError


class Decoder:
    """Greedy prefix-code decoder.

    Bits are appended one at a time to an accumulator; as soon as the
    accumulator equals a known code the symbol is emitted and the
    accumulator is cleared. A prefix-free table makes the first match
    the only possible one.

    :ivar lookup: Mapping from code string to byte value.
    :type lookup: Dict[str, int]
    :ivar max_code_length: Length of the longest code in the table.
    :type max_code_length: int
    """

    def __init__(self, codes: Dict[int, str]):
        """Invert a code table for decoding.

        :param codes: Mapping from byte value to code string.
        :type codes: Dict[int, str]
        :returns: None
        :rtype: None
        """
        self.lookup: Dict[str, int] = {code: symbol for symbol, code in codes.items()}
        self.max_code_length = max((len(code) for code in self.lookup), default=0)

    def decode(self, packed: bytes, bit_count: Optional[int] = None) -> bytes:
        """Decode a packed bitstream.

        With ``bit_count`` only that many bits are consumed and the byte
        padding after them is ignored. Without it every bit is consumed and
        an unmatched tail is dropped, which may yield spurious symbols when
        the padding happens to spell a code.

        :param packed: Packed bitstream bytes.
        :type packed: bytes
        :param bit_count: Exact number of meaningful bits, if known.
        :type bit_count: Optional[int]
        :returns: Decoded bytes.
        :rtype: bytes
        :raises TruncatedStreamError: If ``packed`` holds fewer than
            ``bit_count`` bits.
        :raises UnknownCodeError: If the accumulated bits cannot match any
            code.
        """
        bits = unpack_bits(packed)
        if bit_count is not None:
            if bit_count > len(bits):
                raise TruncatedStreamError(
                    f"Expected {bit_count} bits, stream holds {len(bits)}"
                )
            bits = bits[:bit_count]

        output = bytearray()
        acc = ""
        for bit in bits:
            acc += bit
            symbol = self.lookup.get(acc)
            if symbol is not None:
                output.append(symbol)
                acc = ""
            elif len(acc) >= self.max_code_length:
                raise UnknownCodeError(f"Invalid Huffman code: {acc}")

        if acc and bit_count is not None:
            raise UnknownCodeError(f"Stream ends inside a code: {acc}")
        return bytes(output)
