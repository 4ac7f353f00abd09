from enum import Enum


class Stage(str, Enum):
    """Grammar step that was being read when decoding failed."""

    STRUCTURE_PREFIX = "structure prefix"
    STRING_LENGTH = "string length"
    STRING_VALUE = "string value"
    INTEGER_VALUE = "integer value"
    DICT_KEY = "dict key"
    DICT_VAL = "dict val"
    DICT_SUFFIX = "dict suffix"
    LIST_SUFFIX = "list suffix"
    NESTING_DEPTH = "nesting depth"

    def __str__(self) -> str:
        return self.value


class MalformedInput(Exception):
    """Raised when the input does not follow the bencode grammar.

    `stage` names the rule that failed, `offset` is the number of bytes
    consumed when the failure was detected and `cause` is the underlying
    I/O, parse or type error (also available as `__cause__`).
    """

    def __init__(self, stage: Stage, cause: BaseException, offset: int = 0):
        super().__init__(stage, cause, offset)
        self.stage = stage
        self.cause = cause
        self.offset = offset

    def __str__(self) -> str:
        return f"malformed input, cannot read {self.stage} at offset {self.offset}: {self.cause}"
