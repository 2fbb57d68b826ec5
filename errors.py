### ERROR TYPES ###
# Every failure a compress or decompress call can report to its caller.


class HuffmanError(Exception):
    """Base class for the recoverable compression errors."""


class EmptyInputError(HuffmanError):
    """The source text has zero length, so there is nothing to compress."""


class UnencodableTextError(HuffmanError):
    """The source text holds characters (lone surrogates) that UTF-8 cannot store."""


class FileIOError(HuffmanError):
    """A file could not be read or written."""


class MalformedContainerError(HuffmanError):
    """The bytes on disk do not decode into a tree, a bit count and a payload."""


class MalformedStreamError(HuffmanError):
    """The payload bits do not split cleanly into whole codewords."""
