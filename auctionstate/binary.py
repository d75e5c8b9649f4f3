"""Little-endian field reading and writing for account data, plus kind checks."""

from __future__ import annotations

from .errors import ErrorCode, InvalidAccountData, MetaplexError
from .layout import PUBKEY_SIZE, Key

_U8_MAX = (1 << 8) - 1
_U32_MAX = (1 << 32) - 1
_U64_MAX = (1 << 64) - 1
_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1


class Reader:
    """Reads fields one after another from the start of a byte buffer.

    Bytes after the last field read are ignored, so padded accounts decode.
    """

    def __init__(self, data) -> None:
        self._data = bytes(data)
        self.offset = 0

    @property
    def remaining(self) -> int:
        """Number of bytes not yet read."""
        return len(self._data) - self.offset

    def _take(self, width: int) -> bytes:
        end = self.offset + width
        if end > len(self._data):
            raise InvalidAccountData(
                f"need {width} bytes at offset {self.offset}, "
                f"only {self.remaining} remain"
            )
        chunk = self._data[self.offset : end]
        self.offset = end
        return chunk

    def _unsigned(self, width: int) -> int:
        return int.from_bytes(self._take(width), "little")

    def u8(self) -> int:
        return self._unsigned(1)

    def bool(self) -> bool:
        value = self.u8()
        if value not in (0, 1):
            raise InvalidAccountData(f"invalid boolean byte {value}")
        return value == 1

    def u32(self) -> int:
        return self._unsigned(4)

    def u64(self) -> int:
        return self._unsigned(8)

    def i64(self) -> int:
        return int.from_bytes(self._take(8), "little", signed=True)

    def pubkey(self) -> bytes:
        return self._take(PUBKEY_SIZE)

    def pubkey_vec(self) -> list[bytes]:
        count = self.u32()
        return [self.pubkey() for _ in range(count)]


def _check_range(value: int, low: int, high: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} value must be an int, got {value!r}")
    if not low <= value <= high:
        raise ValueError(f"{value} does not fit in {name}")
    return value


class Writer:
    """Accumulates fields in the order they are written."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def u8(self, value: int) -> None:
        self._buffer += _check_range(value, 0, _U8_MAX, "u8").to_bytes(1, "little")

    def bool(self, value: bool) -> None:
        self._buffer.append(1 if value else 0)

    def u32(self, value: int) -> None:
        self._buffer += _check_range(value, 0, _U32_MAX, "u32").to_bytes(4, "little")

    def u64(self, value: int) -> None:
        self._buffer += _check_range(value, 0, _U64_MAX, "u64").to_bytes(8, "little")

    def i64(self, value: int) -> None:
        checked = _check_range(value, _I64_MIN, _I64_MAX, "i64")
        self._buffer += checked.to_bytes(8, "little", signed=True)

    def pubkey(self, value: bytes) -> None:
        raw = bytes(value)
        if len(raw) != PUBKEY_SIZE:
            raise ValueError(f"a public key is {PUBKEY_SIZE} bytes, got {len(raw)}")
        self._buffer += raw

    def pubkey_vec(self, values) -> None:
        keys = list(values)
        self.u32(len(keys))
        for key in keys:
            self.pubkey(key)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


def check_key(data, key: Key, max_size: int) -> None:
    """Refuse data that is not exactly ``max_size`` long or holds another kind.

    An uninitialized first byte is accepted so freshly allocated accounts load.
    """
    if len(data) != max_size:
        raise MetaplexError(ErrorCode.DataTypeMismatch)
    first = data[0]
    if first != key and first != Key.Uninitialized:
        raise MetaplexError(ErrorCode.DataTypeMismatch)