from .bencode import DEFAULT_MAX_DEPTH, Decoder, Value, decode
from .cursor import Cursor
from .errors import MalformedInput, Stage

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "Cursor",
    "Decoder",
    "MalformedInput",
    "Stage",
    "Value",
    "decode",
]
