"""Bid redemption tickets, read and written directly as bytes.

A version 1 ticket holds its kind, a participation-redeemed flag and one
unused byte. A version 2 ticket holds its kind, an optional winner index,
the auction manager key and a bitmask. Bit ``n`` of the mask, counted from
the most significant bit of the first mask byte, marks the safety deposit
of order ``n`` as redeemed.
"""

from __future__ import annotations

from typing import Optional

from .errors import ErrorCode, MetaplexError
from .layout import PUBKEY_SIZE, Key
from .safety_config import read_order

_WINNER_FLAG_POSITION = 1
_WINNER_INDEX_POSITION = 2
_WINNER_INDEX_SIZE = 8
_MASK_START_WITH_WINNER = 42


def get_index_and_mask(ticket_data, order: int) -> tuple[int, int]:
    """Return the byte position and bit mask that mark ``order`` as redeemed."""
    if order < 0:
        raise MetaplexError(ErrorCode.NumericalOverflowError)
    start = _MASK_START_WITH_WINNER
    if ticket_data[_WINNER_FLAG_POSITION] == 0:
        start -= _WINNER_INDEX_SIZE
    position = order // 8 + start
    mask = 1 << (7 - order % 8)
    return position, mask


def check_ticket(ticket_data, is_participation: bool, config_data: Optional[bytes]) -> None:
    """Refuse a redemption the ticket shows has already happened."""
    kind = ticket_data[0]
    if kind not in (Key.BidRedemptionTicketV1, Key.BidRedemptionTicketV2):
        raise MetaplexError(ErrorCode.DataTypeMismatch)

    if kind == Key.BidRedemptionTicketV1:
        participation_redeemed = ticket_data[1] == 1
        if is_participation and participation_redeemed:
            raise MetaplexError(ErrorCode.BidAlreadyRedeemed)
        return

    if config_data is None:
        raise MetaplexError(ErrorCode.InvalidOperation)
    position, mask = get_index_and_mask(ticket_data, read_order(config_data))
    if ticket_data[position] & mask:
        raise MetaplexError(ErrorCode.BidAlreadyRedeemed)


def save_ticket(
    ticket_data: bytearray,
    participation_redeemed: bool,
    config_data: Optional[bytes],
    winner_index: Optional[int],
    auction_manager: bytes,
    auction_manager_version: Key,
) -> None:
    """Record a redemption in ``ticket_data``, choosing the ticket version as needed."""
    kind = ticket_data[0]
    if kind == Key.BidRedemptionTicketV1 or (
        kind == Key.Uninitialized and auction_manager_version == Key.AuctionManagerV1
    ):
        ticket_data[0] = Key.BidRedemptionTicketV1
        if participation_redeemed:
            ticket_data[1] = 1
        return

    if kind not in (Key.BidRedemptionTicketV2, Key.Uninitialized):
        return

    manager = bytes(auction_manager)
    if len(manager) != PUBKEY_SIZE:
        raise ValueError(f"a public key is {PUBKEY_SIZE} bytes, got {len(manager)}")

    ticket_data[0] = Key.BidRedemptionTicketV2
    offset = _WINNER_INDEX_POSITION
    if winner_index is not None:
        ticket_data[_WINNER_FLAG_POSITION] = 1
        end = _WINNER_INDEX_POSITION + _WINNER_INDEX_SIZE
        ticket_data[_WINNER_INDEX_POSITION:end] = winner_index.to_bytes(
            _WINNER_INDEX_SIZE, "little"
        )
        offset = end
    else:
        ticket_data[_WINNER_FLAG_POSITION] = 0

    ticket_data[offset : offset + PUBKEY_SIZE] = manager

    if config_data is None:
        raise MetaplexError(ErrorCode.InvalidOperation)
    position, mask = get_index_and_mask(ticket_data, read_order(config_data))
    ticket_data[position] |= mask