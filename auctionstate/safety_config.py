"""Safety deposit configuration accounts and their hand-packed byte layout."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, NamedTuple, Optional

from .errors import ErrorCode, InvalidAccountData, MetaplexError
from .layout import (
    BASE_SAFETY_CONFIG_SIZE,
    PUBKEY_SIZE,
    Key,
    NonWinningConstraint,
    TupleNumericType,
    WinningConfigType,
    WinningConstraint,
    numeric_type_from_byte,
    read_number,
    write_number,
)

AUCTION_MANAGER_POSITION = 1
ORDER_POSITION = 33
WINNING_CONFIG_POSITION = 41
AMOUNT_POSITION = 42
LENGTH_POSITION = 43
AMOUNT_RANGE_SIZE_POSITION = 44
AMOUNT_RANGE_FIRST_EL_POSITION = 48

_U64_MAX = (1 << 64) - 1


def _checked(value: int) -> int:
    if value < 0 or value > _U64_MAX:
        raise MetaplexError(ErrorCode.NumericalOverflowError)
    return value


def _byte(data, offset: int) -> int:
    if offset >= len(data):
        raise InvalidAccountData(f"offset {offset} lies beyond {len(data)} bytes")
    return data[offset]


class AmountRange(NamedTuple):
    """How much each winner in a run of winners receives, and how long the run is."""

    amount: int
    length: int


@dataclass(frozen=True)
class ParticipationConfigV2:
    """Who receives the participation prize and at what price."""

    winner_constraint: WinningConstraint
    non_winning_constraint: NonWinningConstraint
    fixed_price: Optional[int] = None


@dataclass(frozen=True)
class ParticipationStateV2:
    """Running total of participation payments owed to the sellers."""

    collected_to_accept_payment: int = 0


@dataclass(frozen=True)
class AmountCumulative:
    """A winner's amount, what precedes it, and the total up to a stopping winner."""

    amount: int
    cumulative_amount: int
    total_amount: int


def read_order(data) -> int:
    """Order of the safety deposit the config describes."""
    return read_number(data, TupleNumericType.U64, ORDER_POSITION)


def read_auction_manager(data) -> bytes:
    """The auction manager key stored in the config."""
    end = AUCTION_MANAGER_POSITION + PUBKEY_SIZE
    if end > len(data):
        raise IndexError(f"{PUBKEY_SIZE} bytes at offset 1 do not fit in {len(data)} bytes")
    return bytes(data[AUCTION_MANAGER_POSITION:end])


def read_amount_type(data) -> TupleNumericType:
    """Width of the amount half of each stored range."""
    return numeric_type_from_byte(_byte(data, AMOUNT_POSITION))


def read_length_type(data) -> TupleNumericType:
    """Width of the length half of each stored range."""
    return numeric_type_from_byte(_byte(data, LENGTH_POSITION))


def read_amount_range_len(data) -> int:
    """Number of amount ranges stored."""
    return read_number(data, TupleNumericType.U32, AMOUNT_RANGE_SIZE_POSITION)


def read_winning_config_type(data) -> WinningConfigType:
    """Kind of prize the config hands out."""
    value = _byte(data, WINNING_CONFIG_POSITION)
    try:
        return WinningConfigType(value)
    except ValueError:
        raise InvalidAccountData(f"unknown winning config type {value}") from None


def _iter_ranges(
    data,
    amount_type: TupleNumericType,
    length_type: TupleNumericType,
    offset: int,
    count: int,
) -> Iterator[AmountRange]:
    step = int(amount_type) + int(length_type)
    for position in range(offset, offset + count * step, step):
        amount = read_number(data, amount_type, position)
        length = read_number(data, length_type, position + int(amount_type))
        yield AmountRange(amount, length)


def find_amount_and_cumulative_offset(
    data, index: int, stop_at_winner_index: Optional[int] = None
) -> AmountCumulative:
    """Find what winner ``index`` receives and how much all earlier winners receive.

    The total sums every range, or stops at ``stop_at_winner_index`` when given.
    """
    amount_type = read_amount_type(data)
    length_type = read_length_type(data)
    count = read_amount_range_len(data)

    cumulative = 0
    total = 0
    amount = 0
    start = 0
    found = False
    for each_gets, length in _iter_ranges(
        data, amount_type, length_type, AMOUNT_RANGE_FIRST_EL_POSITION, count
    ):
        end = _checked(start + length)
        to_add = _checked(each_gets * length)

        if start <= index < end:
            cumulative = _checked(cumulative + _checked((index - start) * each_gets))
            amount = each_gets
            found = True
        elif start < index:
            cumulative = _checked(cumulative + to_add)

        if stop_at_winner_index is not None:
            stop = stop_at_winner_index
            if start <= stop < end:
                total = _checked(total + _checked((stop - start) * each_gets))
                break
            if start < stop:
                total = _checked(total + to_add)
        else:
            total = _checked(total + to_add)

        start = end

    if not found:
        raise MetaplexError(ErrorCode.WinnerIndexNotFound)
    return AmountCumulative(amount=amount, cumulative_amount=cumulative, total_amount=total)


def _read_participation_config(data, offset: int) -> tuple[Optional[ParticipationConfigV2], int]:
    flag = _byte(data, offset)
    if flag == 0:
        return None, offset + 1
    if flag != 1:
        raise InvalidAccountData(f"invalid participation config flag {flag}")
    try:
        winner = WinningConstraint(_byte(data, offset + 1))
        non_winner = NonWinningConstraint(_byte(data, offset + 2))
    except ValueError as exc:
        raise InvalidAccountData(str(exc)) from None
    offset += 3
    price_flag = _byte(data, offset)
    if price_flag == 0:
        fixed_price = None
        offset += 1
    elif price_flag == 1:
        fixed_price = read_number(data, TupleNumericType.U64, offset + 1)
        offset += 9
    else:
        raise InvalidAccountData(f"invalid fixed price flag {price_flag}")
    return ParticipationConfigV2(winner, non_winner, fixed_price), offset


def _read_participation_state(data, offset: int) -> Optional[ParticipationStateV2]:
    flag = _byte(data, offset)
    if flag == 0:
        return None
    if flag != 1:
        raise InvalidAccountData(f"invalid participation state flag {flag}")
    return ParticipationStateV2(read_number(data, TupleNumericType.U64, offset + 1))


@dataclass(kw_only=True)
class SafetyDepositConfig:
    """How one safety deposit's contents are shared out among winners."""

    key: Key = Key.SafetyDepositConfigV1
    auction_manager: bytes = bytes(PUBKEY_SIZE)
    order: int = 0
    winning_config_type: WinningConfigType = WinningConfigType.TokenOnlyTransfer
    amount_type: TupleNumericType = TupleNumericType.U8
    length_type: TupleNumericType = TupleNumericType.U8
    amount_ranges: list[AmountRange] = field(default_factory=list)
    participation_config: Optional[ParticipationConfigV2] = None
    participation_state: Optional[ParticipationStateV2] = None

    def created_size(self) -> int:
        """Size of the account with padding included."""
        step = int(self.amount_type) + int(self.length_type)
        return BASE_SAFETY_CONFIG_SIZE + step * len(self.amount_ranges)

    @classmethod
    def from_bytes(cls, data) -> SafetyDepositConfig:
        if len(data) < BASE_SAFETY_CONFIG_SIZE:
            raise MetaplexError(ErrorCode.DataTypeMismatch)
        if data[0] != Key.SafetyDepositConfigV1:
            raise MetaplexError(ErrorCode.DataTypeMismatch)

        auction_manager = read_auction_manager(data)
        order = read_order(data)
        winning_config_type = read_winning_config_type(data)
        amount_type = read_amount_type(data)
        length_type = read_length_type(data)
        count = read_amount_range_len(data)

        ranges = list(
            _iter_ranges(data, amount_type, length_type, AMOUNT_RANGE_FIRST_EL_POSITION, count)
        )
        offset = AMOUNT_RANGE_FIRST_EL_POSITION + count * (int(amount_type) + int(length_type))
        participation_config, offset = _read_participation_config(data, offset)
        participation_state = _read_participation_state(data, offset)

        return cls(
            key=Key.SafetyDepositConfigV1,
            auction_manager=auction_manager,
            order=order,
            winning_config_type=winning_config_type,
            amount_type=amount_type,
            length_type=length_type,
            amount_ranges=ranges,
            participation_config=participation_config,
            participation_state=participation_state,
        )

    def _state_offset(self) -> int:
        step = int(self.amount_type) + int(self.length_type)
        offset = AMOUNT_RANGE_FIRST_EL_POSITION + step * len(self.amount_ranges)
        config = self.participation_config
        if config is None:
            return offset + 1
        return offset + (12 if config.fixed_price is not None else 4)

    def _encoded_end(self) -> int:
        return self._state_offset() + (9 if self.participation_state is not None else 1)

    def _write_state(self, data: bytearray, offset: int) -> None:
        state = self.participation_state
        if state is None:
            data[offset] = 0
        else:
            data[offset] = 1
            write_number(
                data, TupleNumericType.U64, offset + 1, state.collected_to_accept_payment
            )

    def write(self, data: bytearray, auction_manager_key: bytes) -> None:
        """Pack the config into ``data``, recording ``auction_manager_key`` as its manager."""
        manager = bytes(auction_manager_key)
        if len(manager) != PUBKEY_SIZE:
            raise ValueError(f"a public key is {PUBKEY_SIZE} bytes, got {len(manager)}")
        end = self._encoded_end()
        if len(data) < end:
            raise ValueError(f"config needs {end} bytes, buffer holds {len(data)}")

        data[0] = Key.SafetyDepositConfigV1
        data[AUCTION_MANAGER_POSITION : AUCTION_MANAGER_POSITION + PUBKEY_SIZE] = manager
        write_number(data, TupleNumericType.U64, ORDER_POSITION, self.order)
        data[WINNING_CONFIG_POSITION] = int(self.winning_config_type)
        data[AMOUNT_POSITION] = int(self.amount_type)
        data[LENGTH_POSITION] = int(self.length_type)
        write_number(
            data, TupleNumericType.U32, AMOUNT_RANGE_SIZE_POSITION, len(self.amount_ranges)
        )

        offset = AMOUNT_RANGE_FIRST_EL_POSITION
        for amount, length in self.amount_ranges:
            write_number(data, self.amount_type, offset, amount)
            offset += int(self.amount_type)
            write_number(data, self.length_type, offset, length)
            offset += int(self.length_type)

        config = self.participation_config
        if config is None:
            data[offset] = 0
            offset += 1
        else:
            data[offset] = 1
            data[offset + 1] = int(config.winner_constraint)
            data[offset + 2] = int(config.non_winning_constraint)
            offset += 3
            if config.fixed_price is None:
                data[offset] = 0
                offset += 1
            else:
                data[offset] = 1
                write_number(data, TupleNumericType.U64, offset + 1, config.fixed_price)
                offset += 9

        self._write_state(data, offset)

    def save_participation_state(self, data: bytearray) -> None:
        """Rewrite only the participation state, the one part that changes."""
        end = self._encoded_end()
        if len(data) < end:
            raise ValueError(f"config needs {end} bytes, buffer holds {len(data)}")
        self._write_state(data, self._state_offset())