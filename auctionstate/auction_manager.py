"""Version 2 auction managers and the checks they make on prize configs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .binary import Reader, Writer, check_key
from .errors import ErrorCode, InvalidAccountData, MetaplexError
from .layout import (
    MAX_AUCTION_MANAGER_V2_SIZE,
    PUBKEY_SIZE,
    AuctionManagerStatus,
    Key,
    WinningConfigType,
)
from .safety_config import (
    ParticipationConfigV2,
    ParticipationStateV2,
    SafetyDepositConfig,
    find_amount_and_cumulative_offset,
    read_winning_config_type,
)
from .tracker import AuctionWinnerTokenTypeTracker

STATUS_POSITION = 161

_U64_MAX = (1 << 64) - 1
_ZERO_PUBKEY = bytes(PUBKEY_SIZE)


def _checked(value: int) -> int:
    if value < 0 or value > _U64_MAX:
        raise MetaplexError(ErrorCode.NumericalOverflowError)
    return value


def _require(config_data):
    if config_data is None:
        raise MetaplexError(ErrorCode.InvalidOperation)
    return config_data


@dataclass(frozen=True)
class WinningIndexResult:
    """What a winner receives from one safety deposit."""

    amount: int
    winning_config_type: WinningConfigType
    winning_config_item_index: Optional[int]


@dataclass(frozen=True)
class PrintingV2CalculationResult:
    """Outcome of checking an edition number a winner asks to print."""

    expected_redemptions: int
    winning_config_type: WinningConfigType
    winning_config_item_index: Optional[int]


@dataclass
class AuctionManagerStateV2:
    """Mutable progress of an auction manager."""

    status: AuctionManagerStatus = AuctionManagerStatus.Initialized
    safety_config_items_validated: int = 0
    bids_pushed_to_accept_payment: int = 0
    has_participation: bool = False


@dataclass(kw_only=True)
class AuctionManagerV2:
    """An auction manager whose prizes are described by safety deposit configs."""

    key: Key = Key.AuctionManagerV2
    store: bytes = _ZERO_PUBKEY
    authority: bytes = _ZERO_PUBKEY
    auction: bytes = _ZERO_PUBKEY
    vault: bytes = _ZERO_PUBKEY
    accept_payment: bytes = _ZERO_PUBKEY
    state: AuctionManagerStateV2 = field(default_factory=AuctionManagerStateV2)

    @classmethod
    def from_bytes(cls, data) -> AuctionManagerV2:
        check_key(data, Key.AuctionManagerV2, MAX_AUCTION_MANAGER_V2_SIZE)
        reader = Reader(data)
        raw_key = reader.u8()
        try:
            key = Key(raw_key)
        except ValueError:
            raise InvalidAccountData(f"unknown account kind {raw_key}") from None
        store = reader.pubkey()
        authority = reader.pubkey()
        auction = reader.pubkey()
        vault = reader.pubkey()
        accept_payment = reader.pubkey()
        raw_status = reader.u8()
        try:
            status = AuctionManagerStatus(raw_status)
        except ValueError:
            raise InvalidAccountData(f"unknown auction manager status {raw_status}") from None
        state = AuctionManagerStateV2(
            status=status,
            safety_config_items_validated=reader.u64(),
            bids_pushed_to_accept_payment=reader.u64(),
            has_participation=reader.bool(),
        )
        return cls(
            key=key,
            store=store,
            authority=authority,
            auction=auction,
            vault=vault,
            accept_payment=accept_payment,
            state=state,
        )

    def to_bytes(self) -> bytes:
        writer = Writer()
        writer.u8(self.key)
        writer.pubkey(self.store)
        writer.pubkey(self.authority)
        writer.pubkey(self.auction)
        writer.pubkey(self.vault)
        writer.pubkey(self.accept_payment)
        writer.u8(self.state.status)
        writer.u64(self.state.safety_config_items_validated)
        writer.u64(self.state.bids_pushed_to_accept_payment)
        writer.bool(self.state.has_participation)
        raw = writer.getvalue()
        return raw + bytes(MAX_AUCTION_MANAGER_V2_SIZE - len(raw))

    def fast_save(self, data: bytearray) -> None:
        """Write only the status byte into ``data``."""
        data[STATUS_POSITION] = int(self.state.status)

    def common_winning_index_checks(self, winning_index: int, config_data) -> WinningIndexResult:
        """Return what winner ``winning_index`` receives from the config."""
        config = _require(config_data)
        found = find_amount_and_cumulative_offset(config, winning_index, None)
        return WinningIndexResult(
            amount=found.amount,
            winning_config_type=read_winning_config_type(config),
            winning_config_item_index=0,
        )

    def printing_v2_calculation_checks(
        self, winning_index: int, config_data, edition_offset: int, winners: int
    ) -> PrintingV2CalculationResult:
        """Check ``edition_offset`` lies within the editions owed to this winner."""
        config = _require(config_data)
        found = find_amount_and_cumulative_offset(config, winning_index, winners)
        lowest = _checked(found.cumulative_amount + 1)
        beyond = _checked(lowest + found.amount)
        if edition_offset < lowest or edition_offset >= beyond:
            raise MetaplexError(ErrorCode.InvalidEditionNumber)
        return PrintingV2CalculationResult(
            expected_redemptions=found.total_amount,
            winning_config_type=read_winning_config_type(config),
            winning_config_item_index=0,
        )

    def get_participation_config(self, config_data) -> ParticipationConfigV2:
        config = SafetyDepositConfig.from_bytes(config_data)
        if config.participation_config is None:
            raise MetaplexError(ErrorCode.NotEligibleForParticipation)
        return config.participation_config

    def add_to_collected_payment(self, config_data: bytearray, price: int) -> None:
        """Add ``price`` to the participation ledger stored in ``config_data``."""
        config = SafetyDepositConfig.from_bytes(config_data)
        state = config.participation_state
        if state is None:
            return
        config.participation_state = ParticipationStateV2(
            _checked(state.collected_to_accept_payment + price)
        )
        config.save_participation_state(config_data)

    def assert_legacy_printing_token_match(self) -> None:
        """Always refuse: legacy printing tokens cannot be used with this manager."""
        raise MetaplexError(ErrorCode.PrintingAuthorizationTokenAccountMismatch)

    def get_max_bids_allowed_before_removal_is_stopped(self, config_data) -> int:
        """Number of leading winners who receive nothing from this deposit."""
        config = SafetyDepositConfig.from_bytes(_require(config_data))
        offset = 0
        for amount, length in config.amount_ranges:
            if amount > 0:
                return offset
            offset = _checked(offset + length)
        return 0

    def assert_is_valid_master_edition_v2_safety_deposit(self, config_data) -> None:
        config = SafetyDepositConfig.from_bytes(_require(config_data))
        if config.winning_config_type not in (
            WinningConfigType.PrintingV2,
            WinningConfigType.Participation,
        ):
            raise MetaplexError(ErrorCode.InvalidOperation)

    def mark_bid_as_claimed(self) -> None:
        self.state.bids_pushed_to_accept_payment = _checked(
            self.state.bids_pushed_to_accept_payment + 1
        )

    def assert_all_bids_claimed(self, num_winners: int) -> None:
        if self.state.bids_pushed_to_accept_payment != num_winners:
            raise MetaplexError(ErrorCode.NotAllBidsClaimed)

    def get_number_of_unique_token_types_for_this_winner(
        self, winner_index: int, tracker_data
    ) -> int:
        tracker = AuctionWinnerTokenTypeTracker.from_bytes(_require(tracker_data))
        start = 0
        for amount, length in tracker.amount_ranges:
            end = _checked(start + length)
            if start <= winner_index < end:
                return amount
            start = end
        raise MetaplexError(ErrorCode.NoTokensForThisWinner)

    def get_collected_to_accept_payment(self, config_data) -> int:
        config = SafetyDepositConfig.from_bytes(_require(config_data))
        state = config.participation_state
        return 0 if state is None else state.collected_to_accept_payment

    def get_primary_sale_happened(self, primary_sale_happened: bool) -> bool:
        """Editions printed by this manager always stay inside the auction."""
        return bool(primary_sale_happened)


def get_auction_manager(data) -> AuctionManagerV2:
    """Decode an auction manager account; only version 2 managers are accepted."""
    if len(data) == 0 or data[0] != Key.AuctionManagerV2:
        raise MetaplexError(ErrorCode.DataTypeMismatch)
    return AuctionManagerV2.from_bytes(data)