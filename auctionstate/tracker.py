"""Tracker of how many distinct token types each auction winner receives."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from .errors import ErrorCode, MetaplexError
from .layout import (
    BASE_TRACKER_SIZE,
    Key,
    TupleNumericType,
    numeric_type_from_byte,
    read_number,
    write_number,
)
from .safety_config import AmountRange

_AMOUNT_TYPE_POSITION = 1
_LENGTH_TYPE_POSITION = 2
_RANGE_LEN_POSITION = 3
_FIRST_RANGE_POSITION = 7

_U64_MAX = (1 << 64) - 1


def _checked(value: int) -> int:
    if value < 0 or value > _U64_MAX:
        raise MetaplexError(ErrorCode.NumericalOverflowError)
    return value


@dataclass(kw_only=True)
class AuctionWinnerTokenTypeTracker:
    """Ranges of winners paired with the number of token types each receives."""

    key: Key = Key.AuctionWinnerTokenTypeTrackerV1
    amount_type: TupleNumericType = TupleNumericType.U8
    length_type: TupleNumericType = TupleNumericType.U8
    amount_ranges: list[AmountRange] = field(default_factory=list)

    def _step(self) -> int:
        return int(self.amount_type) + int(self.length_type)

    def created_size(self, range_size: int) -> int:
        """Account size needed to hold ``range_size`` ranges."""
        return BASE_TRACKER_SIZE + self._step() * range_size

    @classmethod
    def from_bytes(cls, data) -> AuctionWinnerTokenTypeTracker:
        if len(data) < BASE_TRACKER_SIZE:
            raise MetaplexError(ErrorCode.DataTypeMismatch)
        if data[0] != Key.AuctionWinnerTokenTypeTrackerV1:
            raise MetaplexError(ErrorCode.DataTypeMismatch)

        amount_type = numeric_type_from_byte(data[_AMOUNT_TYPE_POSITION])
        length_type = numeric_type_from_byte(data[_LENGTH_TYPE_POSITION])
        count = read_number(data, TupleNumericType.U32, _RANGE_LEN_POSITION)

        step = int(amount_type) + int(length_type)
        ranges = [
            AmountRange(
                read_number(data, amount_type, position),
                read_number(data, length_type, position + int(amount_type)),
            )
            for position in range(_FIRST_RANGE_POSITION, _FIRST_RANGE_POSITION + count * step, step)
        ]
        return cls(
            key=Key.AuctionWinnerTokenTypeTrackerV1,
            amount_type=amount_type,
            length_type=length_type,
            amount_ranges=ranges,
        )

    def add_one_where_positive_ranges_occur(self, amount_ranges) -> None:
        """Merge in a config's ranges, counting one more type wherever it gives anything.

        Ten winners with one type each, merged with ranges where only third
        place receives something, becomes: places 1-2 with one type, place 3
        with two, places 4-10 with one.
        """
        incoming = list(amount_ranges)
        if not self.amount_ranges:
            self.amount_ranges = [
                AmountRange(1 if amount > 0 else 0, length) for amount, length in incoming
            ]
            return
        if not incoming:
            return

        mine = deque([amount, length] for amount, length in self.amount_ranges)
        theirs = deque([amount, length] for amount, length in incoming)
        merged: list[AmountRange] = []

        while mine or theirs:
            to_add = 1 if theirs and theirs[0][0] > 0 else 0
            if not mine:
                _, length = theirs.popleft()
                merged.append(AmountRange(to_add, length))
            elif not theirs:
                amount, length = mine.popleft()
                merged.append(AmountRange(amount, length))
            else:
                my_amount, my_length = mine[0]
                their_length = theirs[0][1]
                bumped = _checked(my_amount + to_add)
                if my_length > their_length:
                    mine[0][1] = my_length - their_length
                    merged.append(AmountRange(bumped, their_length))
                    theirs.popleft()
                elif their_length > my_length:
                    theirs[0][1] = their_length - my_length
                    merged.append(AmountRange(bumped, my_length))
                    mine.popleft()
                else:
                    merged.append(AmountRange(bumped, my_length))
                    mine.popleft()
                    theirs.popleft()

        self.amount_ranges = merged

    def save(self, data: bytearray) -> None:
        """Pack the tracker into the start of ``data``."""
        needed = _FIRST_RANGE_POSITION + self._step() * len(self.amount_ranges)
        if len(data) < needed:
            raise ValueError(f"tracker needs {needed} bytes, buffer holds {len(data)}")

        data[0] = Key.AuctionWinnerTokenTypeTrackerV1
        data[_AMOUNT_TYPE_POSITION] = int(self.amount_type)
        data[_LENGTH_TYPE_POSITION] = int(self.length_type)
        write_number(data, TupleNumericType.U32, _RANGE_LEN_POSITION, len(self.amount_ranges))

        offset = _FIRST_RANGE_POSITION
        for amount, length in self.amount_ranges:
            write_number(data, self.amount_type, offset, amount)
            offset += int(self.amount_type)
            write_number(data, self.length_type, offset, length)
            offset += int(self.length_type)