"""Account kinds, enumerations, sizes and variable-width number fields."""

from __future__ import annotations

from enum import IntEnum

from .errors import InvalidAccountData

PREFIX = "metaplex"
TOTALS = "totals"
INDEX = "index"
CACHE = "cache"

PUBKEY_SIZE = 32

BASE_TRACKER_SIZE = 1 + 1 + 1 + 4

MAX_INDEXED_ELEMENTS = 100
MAX_STORE_INDEXER_SIZE = 1 + 32 + 8 + 4 + 32 * MAX_INDEXED_ELEMENTS

MAX_METADATA_PER_CACHE = 10
MAX_AUCTION_CACHE_SIZE = 1 + 32 + 8 + 4 + 32 * MAX_METADATA_PER_CACHE + 32 + 32 + 32

MAX_AUCTION_MANAGER_V2_SIZE = 1 + 32 + 32 + 32 + 32 + 32 + 1 + 1 + 8 + 200
MAX_STORE_SIZE = 2 + 32 + 32 + 32 + 32 + 100
MAX_WHITELISTED_CREATOR_SIZE = 2 + 32 + 10
MAX_PAYOUT_TICKET_SIZE = 1 + 32 + 8
MAX_BID_REDEMPTION_TICKET_SIZE = 3
MAX_AUTHORITY_LOOKUP_SIZE = 33
MAX_PRIZE_TRACKING_TICKET_SIZE = 1 + 32 + 8 + 8 + 8 + 50
BASE_SAFETY_CONFIG_SIZE = 1 + 32 + 8 + 1 + 1 + 1 + 4 + 1 + 1 + 1 + 9 + 1 + 8 + 20


class Key(IntEnum):
    """The first byte of every account, naming what the account holds."""

    Uninitialized = 0
    OriginalAuthorityLookupV1 = 1
    BidRedemptionTicketV1 = 2
    StoreV1 = 3
    WhitelistedCreatorV1 = 4
    PayoutTicketV1 = 5
    SafetyDepositValidationTicketV1 = 6
    AuctionManagerV1 = 7
    PrizeTrackingTicketV1 = 8
    SafetyDepositConfigV1 = 9
    AuctionManagerV2 = 10
    BidRedemptionTicketV2 = 11
    AuctionWinnerTokenTypeTrackerV1 = 12
    StoreIndexerV1 = 13
    AuctionCacheV1 = 14


class WinningConstraint(IntEnum):
    """Whether winners also receive the participation prize."""

    NoParticipationPrize = 0
    ParticipationPrizeGiven = 1


class NonWinningConstraint(IntEnum):
    """How non-winners may obtain the participation prize."""

    NoParticipationPrize = 0
    GivenForFixedPrice = 1
    GivenForBidPrice = 2


class WinningConfigType(IntEnum):
    """What kind of prize a safety deposit hands out."""

    TokenOnlyTransfer = 0
    FullRightsTransfer = 1
    PrintingV1 = 2
    PrintingV2 = 3
    Participation = 4


class AuctionManagerStatus(IntEnum):
    """Lifecycle stage of an auction manager."""

    Initialized = 0
    Validated = 1
    Running = 2
    Disbursing = 3
    Finished = 4


class TupleNumericType(IntEnum):
    """Width in bytes of a number stored in an amount range.

    The padding members keep each value equal to its byte width.
    """

    Padding0 = 0
    U8 = 1
    U16 = 2
    Padding1 = 3
    U32 = 4
    Padding2 = 5
    Padding3 = 6
    Padding4 = 7
    U64 = 8


_WIDTHS = frozenset(
    {TupleNumericType.U8, TupleNumericType.U16, TupleNumericType.U32, TupleNumericType.U64}
)


def numeric_type_from_byte(value: int) -> TupleNumericType:
    """Return the numeric type a stored byte names, refusing padding values."""
    try:
        numeric_type = TupleNumericType(value)
    except ValueError:
        raise InvalidAccountData(f"unknown numeric type {value}") from None
    if numeric_type not in _WIDTHS:
        raise InvalidAccountData(f"unknown numeric type {value}")
    return numeric_type


def _span(data, offset: int, width: int) -> None:
    if offset < 0 or offset + width > len(data):
        raise IndexError(
            f"{width} bytes at offset {offset} do not fit in {len(data)} bytes"
        )


def read_number(data, numeric_type: TupleNumericType, offset: int) -> int:
    """Read a little-endian number of the given width; padding types read as 0."""
    if numeric_type not in _WIDTHS:
        return 0
    width = int(numeric_type)
    _span(data, offset, width)
    return int.from_bytes(bytes(data[offset : offset + width]), "little")


def write_number(data: bytearray, numeric_type: TupleNumericType, offset: int, value: int) -> None:
    """Write ``value`` truncated to the given width; padding types write nothing."""
    if numeric_type not in _WIDTHS:
        return
    width = int(numeric_type)
    _span(data, offset, width)
    truncated = value & ((1 << (8 * width)) - 1)
    data[offset : offset + width] = truncated.to_bytes(width, "little")