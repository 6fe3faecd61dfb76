import logging
from dataclasses import dataclass

from bitpack import add_padding, convert_to_binary_string, pack, remove_padding, unpack
from errors import (
    EmptyInputError,
    InvalidBitPathError,
    InvalidSymbolError,
    MalformedArtifactError,
    ParseOverrunError,
)
from heap import PriorityQueue

logger = logging.getLogger(__name__)

# Structural markers of the serialized tree
LEAF_MARKER = "'"
LEFT_MARKER = "0"
RIGHT_MARKER = "1"

# Code given to the only symbol of a one-symbol alphabet
SINGLE_SYMBOL_CODE = "0"


### HUFFMAN NODE CLASSES ###
@dataclass(frozen=True)
class Leaf:
    """Terminal node carrying one alphabet symbol."""
    symbol: str


@dataclass(frozen=True)
class Internal:
    """Merge of two subtrees. Weights only live in the queue, never here."""
    left: object
    right: object


### FREQUENCY COUNTING ###
def build_frequency_map(symbols):
    """Count every symbol, keeping the order in which symbols first appear."""
    frequency = {}
    for symbol in symbols:
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise InvalidSymbolError(f"symbol must be a single character, got {symbol!r}")
        frequency[symbol] = frequency.get(symbol, 0) + 1
    return frequency


### TREE AND CODE GENERATION ###
def build_tree(frequency):
    """
    Builds the Huffman tree from a symbol -> count mapping.

    Every symbol goes into the queue keyed by its negated count, so the
    max-heap hands back the two lightest entries first. They are merged into
    an Internal node (first extracted on the left) and pushed back until a
    single entry, the root, remains.
    """
    if not frequency:
        raise EmptyInputError("cannot build a Huffman tree without any symbols")

    queue = PriorityQueue()
    for symbol, count in frequency.items():
        queue.insert((-count, Leaf(symbol)))

    while queue.size() > 1:
        first_key, first = queue.extract_max()
        second_key, second = queue.extract_max()
        queue.insert((first_key + second_key, Internal(first, second)))

    _, root = queue.extract_max()
    logger.debug("Built Huffman tree over %d distinct symbols", len(frequency))
    return root


def get_mappings(node, path=""):
    """Returns the symbol -> bit-path table for the tree rooted at node."""
    # A lone leaf would otherwise get the empty code and lose repetition counts
    if isinstance(node, Leaf) and not path:
        return {node.symbol: SINGLE_SYMBOL_CODE}

    mappings = {}

    def collect(current, current_path):
        if isinstance(current, Leaf):
            mappings[current.symbol] = current_path
            return
        collect(current.left, current_path + "0")
        collect(current.right, current_path + "1")

    collect(node, path)
    return mappings


### TREE SERIALIZATION ###
def stringify(node):
    """Serialize a tree: leaves as 'X, internal nodes as 0<left>1<right>."""
    if isinstance(node, Leaf):
        if len(node.symbol) != 1:
            raise InvalidSymbolError(f"leaf symbol must be a single character, got {node.symbol!r}")
        return LEAF_MARKER + node.symbol
    return LEFT_MARKER + stringify(node.left) + RIGHT_MARKER + stringify(node.right)


class _Cursor:
    """Read position into a serialized tree, owned by a single parse."""

    def __init__(self, text, pos=0):
        self.text = text
        self.pos = pos

    def read(self, expected):
        if self.pos >= len(self.text):
            raise ParseOverrunError(
                f"serialized tree ended at offset {self.pos} while reading {expected}"
            )
        char = self.text[self.pos]
        self.pos += 1
        return char


def _read_tree(cursor):
    # Explicit stack instead of recursion. A None entry is an internal node
    # still waiting for its left child; a node entry is a finished left child
    # waiting for its right sibling.
    pending = []
    while True:
        marker = cursor.read("a node marker")
        if marker == LEFT_MARKER:
            pending.append(None)
            continue
        if marker != LEAF_MARKER:
            raise MalformedArtifactError(
                f"unexpected {marker!r} at offset {cursor.pos - 1} of serialized tree"
            )

        node = Leaf(cursor.read("a leaf symbol"))
        while pending:
            left = pending.pop()
            if left is None:
                separator = cursor.read("the right-subtree marker")
                if separator != RIGHT_MARKER:
                    raise MalformedArtifactError(
                        f"expected {RIGHT_MARKER!r} at offset {cursor.pos - 1}, found {separator!r}"
                    )
                pending.append(node)
                break
            node = Internal(left, node)
        else:
            return node


def destringify(text):
    """Parse a serialized tree. The whole text must be consumed."""
    cursor = _Cursor(text)
    tree = _read_tree(cursor)
    if cursor.pos != len(text):
        raise MalformedArtifactError(
            f"{len(text) - cursor.pos} trailing characters after serialized tree"
        )
    return tree


def display(tree):
    """
    Human-readable listing of the tree, numbered like a heap (root is 1,
    children of i are 2i and 2i+1). Only meant for presentation.
    """
    lines = []
    stack = [(tree, 1)]
    while stack:
        node, index = stack.pop()
        if isinstance(node, Leaf):
            lines.append(f"{index} = {node.symbol}")
            continue
        lines.append(f"{index * 2} <= {index} => {index * 2 + 1}")
        stack.append((node.right, index * 2 + 1))
        stack.append((node.left, index * 2))
    return "\n".join(lines)


### ENCODING ###
def encode_with_tree(symbols):
    """Like encode(), but also returns the tree that was built."""
    frequency = build_frequency_map(symbols)
    tree = build_tree(frequency)
    mappings = get_mappings(tree)

    bits = convert_to_binary_string(symbols, mappings)
    padded, pad_count = add_padding(bits)
    payload = pack(padded).decode("latin-1")
    logger.debug("Encoded %d bits with %d padding bits", len(bits), pad_count)

    return f"{stringify(tree)}\n{pad_count}\n{payload}", tree


def encode(symbols):
    """
    Encodes a symbol sequence into the three-part artifact:

        <serialized tree>\\n<pad count>\\n<packed bytes as characters>
    """
    artifact, _ = encode_with_tree(symbols)
    return artifact


### DECODING ###
def parse_artifact(artifact):
    """
    Splits an artifact into (tree, pad_count, packed_bytes).

    The tree is read by its grammar rather than by line, so a newline symbol
    inside the tree (the old four-line layout) or a 0x0A payload byte does not
    confuse the split.
    """
    cursor = _Cursor(artifact)
    tree = _read_tree(cursor)

    rest = artifact[cursor.pos:]
    if not rest.startswith("\n"):
        raise MalformedArtifactError("missing newline after serialized tree")

    pad_text, separator, payload = rest[1:].partition("\n")
    if not separator:
        raise MalformedArtifactError("missing newline after pad count")
    if len(pad_text) != 1 or pad_text not in "01234567":
        raise MalformedArtifactError(f"invalid pad count {pad_text!r}")
    if not payload:
        raise MalformedArtifactError("artifact carries no packed data")

    try:
        packed = payload.encode("latin-1")
    except UnicodeEncodeError as e:
        raise MalformedArtifactError("packed data contains characters above U+00FF") from e

    return tree, int(pad_text), packed


def decode_binary_string(bits, tree):
    """Walk the tree bit by bit, emitting a symbol at every leaf."""
    if bits.strip("01"):
        raise InvalidBitPathError("bit string may only contain '0' and '1'")
    if isinstance(tree, Leaf):
        if "1" in bits:
            raise InvalidBitPathError("single-symbol stream contains a '1' bit")
        return tree.symbol * len(bits)

    decoded = []
    node = tree
    for bit in bits:
        node = node.left if bit == "0" else node.right
        if isinstance(node, Leaf):
            decoded.append(node.symbol)
            node = tree

    if node is not tree:
        raise InvalidBitPathError("bit stream ended in the middle of a code")
    return "".join(decoded)


def decode_with_tree(artifact):
    """Like decode(), but also returns the parsed tree."""
    tree, pad_count, packed = parse_artifact(artifact)
    bits = remove_padding(unpack(packed), pad_count)
    logger.debug("Decoding %d bits (%d padding bits dropped)", len(bits), pad_count)
    return decode_binary_string(bits, tree), tree


def decode(artifact):
    """Inverse of encode()."""
    symbols, _ = decode_with_tree(artifact)
    return symbols
