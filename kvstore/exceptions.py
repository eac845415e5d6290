class KeyValueStoreError(Exception):
    """Base class for every error raised by the store."""


class StoreUnreachableError(KeyValueStoreError):
    """The backing file or database could not be created, opened or written."""


class StoreCorruptError(KeyValueStoreError):
    """The backing medium holds data that cannot be parsed.

    On a JSON store this condition is sticky: every later call fails the same
    way until the file is replaced with valid content and reloaded.
    """


class KeyNotFoundError(KeyValueStoreError, KeyError):
    pass


class IllegalTypeError(KeyValueStoreError, TypeError):
    """Requested or supplied type is not one of str, int, bool, float, Float32."""


class TypeMismatchError(KeyValueStoreError, TypeError):
    """Stored value cannot be converted to the requested kind."""


class CodecError(ValueError):
    pass


class UnsupportedPathError(OSError):
    pass
