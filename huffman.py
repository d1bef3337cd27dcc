import heapq
from collections import Counter
from typing import Dict, Iterable


class HuffmanNode:
    """Node of a binary Huffman tree.

    Internal nodes own their two children; dropping the root releases
    the whole tree.

    :ivar symbol: Byte value stored at a leaf; ``None`` for internal nodes.
    :type symbol: int | None
    :ivar freq: Frequency (weight) of the subtree rooted at this node.
    :type freq: int
    :ivar low: Smallest byte value found in this subtree, used to break
        frequency ties.
    :type low: int
    :ivar left: Left child node.
    :type left: HuffmanNode | None
    :ivar right: Right child node.
    :type right: HuffmanNode | None
    """

    def __init__(self, symbol=None, freq=0, left=None, right=None):
        """Create a Huffman node.

        :param symbol: Byte value for leaf nodes; ``None`` for internal nodes.
        :type symbol: int | None
        :param int freq: Frequency (weight) associated with this node.
        :param left: Left child node, if any.
        :type left: HuffmanNode|None
        :param right: Right child node, if any.
        :type right: HuffmanNode|None
        :returns: None
        :rtype: None
        """
        self.symbol = symbol
        self.freq = freq
        self.left = left
        self.right = right
        if symbol is not None:
            self.low = symbol
        else:
            self.low = min(left.low, right.low)

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __lt__(self, other):
        """Order nodes by frequency, then by smallest contained byte value.

        Subtrees in the heap are disjoint, so ``low`` never repeats and
        this is a total order.

        :param other: Another node to compare with.
        :type other: HuffmanNode
        :returns: ``True`` if this node sorts before ``other``.
        :rtype: bool
        """
        return (self.freq, self.low) < (other.freq, other.low)

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode(symbol={self.symbol!r}, freq={self.freq})"
        return f"HuffmanNode(freq={self.freq}, low={self.low})"


def is_prefix_free(codes: Iterable[str]) -> bool:
    """Check that no code is a prefix of another one.

    After sorting, a code that prefixes others is immediately followed
    by one of them, so only neighbours need comparing.

    :param codes: Code strings made of ``'0'``/``'1'``.
    :type codes: Iterable[str]
    :returns: ``True`` if the set of codes is prefix-free.
    :rtype: bool
    """
    ordered = sorted(codes)
    for shorter, longer in zip(ordered, ordered[1:]):
        if longer.startswith(shorter):
            return False
    return True


class HuffmanCoder:
    """Static Huffman coder over byte values.

    :ivar NEWLINE: Byte value that ``always_include_newline`` forces in.
    :type NEWLINE: int
    :ivar always_include_newline: Add one extra count for the newline byte
        so it always receives a code.
    :type always_include_newline: bool
    :ivar codes: Mapping from byte value to its bit-code string.
    :type codes: Dict[int, str]
    """

    NEWLINE = 0x0A

    def __init__(self, always_include_newline: bool = True):
        """Initialize an empty coder.

        :param always_include_newline: Whether the newline byte always gets
            a code, even when absent from the input.
        :type always_include_newline: bool
        :returns: None
        :rtype: None
        """
        self.always_include_newline = always_include_newline
        self.codes: Dict[int, str] = {}

    def count_frequencies(self, data: bytes) -> Dict[int, int]:
        """Count occurrences of every byte value in ``data``.

        :param data: Input bytes (may be empty).
        :type data: bytes
        :returns: Mapping from byte value to count, positive counts only.
        :rtype: Dict[int, int]
        """
        frequencies = Counter(data)
        if self.always_include_newline:
            frequencies[self.NEWLINE] += 1
        return dict(frequencies)

    @staticmethod
    def build_tree(frequencies: Dict[int, int]) -> HuffmanNode:
        """Build a Huffman tree by repeatedly merging the two lightest nodes.

        The first node popped becomes the left child. With a single
        distinct symbol the lone leaf is returned as the root.

        :param frequencies: Mapping from byte value to positive frequency.
        :type frequencies: Dict[int, int]
        :returns: Root of the tree.
        :rtype: HuffmanNode
        :raises ValueError: If ``frequencies`` is empty.
        """
        if not frequencies:
            raise ValueError("Cannot build a Huffman tree without symbols")

        heap = [HuffmanNode(symbol=sym, freq=freq) for sym, freq in frequencies.items()]
        heapq.heapify(heap)

        while len(heap) > 1:
            left = heapq.heappop(heap)
            right = heapq.heappop(heap)
            merged = HuffmanNode(freq=left.freq + right.freq, left=left, right=right)
            heapq.heappush(heap, merged)

        return heap[0]

    @staticmethod
    def generate_codes(root: HuffmanNode) -> Dict[int, str]:
        """Assign a code to every leaf by walking the tree depth-first.

        Descending left appends ``"0"``, descending right appends ``"1"``.
        A root that is itself a leaf gets ``"0"``, since an empty code
        could not be written to the bitstream.

        :param root: Root of a Huffman tree.
        :type root: HuffmanNode
        :returns: Mapping from byte value to code string.
        :rtype: Dict[int, str]
        """
        if root.is_leaf:
            return {root.symbol: "0"}

        codes: Dict[int, str] = {}
        HuffmanCoder._walk(root, "", codes)
        return codes

    @staticmethod
    def _walk(node: HuffmanNode, path: str, codes: Dict[int, str]):
        """Record the path to every leaf below ``node`` into ``codes``.

        :param node: Current node in the Huffman tree.
        :type node: HuffmanNode
        :param path: Bits accumulated from the root down to ``node``.
        :type path: str
        :param codes: Mapping being filled.
        :type codes: Dict[int, str]
        :returns: None
        :rtype: None
        """
        if node.is_leaf:
            codes[node.symbol] = path
        else:
            HuffmanCoder._walk(node.left, path + "0", codes)
            HuffmanCoder._walk(node.right, path + "1", codes)

    def build_from_data(self, data: bytes) -> Dict[int, str]:
        """Count, build the tree and generate codes for ``data``.

        The tree is discarded once the codes exist.

        :param data: Input bytes.
        :type data: bytes
        :returns: The new code table (also stored in ``codes``).
        :rtype: Dict[int, str]
        """
        frequencies = self.count_frequencies(data)
        if not frequencies:
            self.codes = {}
            return self.codes
        self.codes = self.generate_codes(self.build_tree(frequencies))
        return self.codes

    def encode_symbol(self, symbol: int) -> str:
        """Get the code of a byte value.

        :param symbol: Byte value to encode.
        :type symbol: int
        :returns: Code string.
        :rtype: str
        :raises ValueError: If ``symbol`` has no code in the current table.
        """
        try:
            return self.codes[symbol]
        except KeyError:
            raise ValueError(f"No code for symbol {symbol}") from None
