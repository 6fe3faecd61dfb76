### ERROR TYPES ###
# Every failure raised by the Huffman core derives from HuffmanError so that
# callers (the web layer in particular) can catch them in one place.


class HuffmanError(Exception):
    """Base class for all encode/decode failures."""


class EmptyInputError(HuffmanError, ValueError):
    """Raised when there are no symbols to build a tree from."""


class QueueUnderflowError(HuffmanError, IndexError):
    """Raised when extracting from an empty priority queue."""


class MalformedArtifactError(HuffmanError, ValueError):
    """Raised when an encoded artifact does not have the expected layout."""


class ParseOverrunError(MalformedArtifactError):
    """Raised when the serialized tree ends before it is complete."""


class InvalidBitPathError(HuffmanError, ValueError):
    """Raised when the bit stream does not end on a leaf."""


class InvalidSymbolError(HuffmanError, ValueError):
    """Raised when an input symbol is not a single character."""
