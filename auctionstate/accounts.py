"""Fixed-kind accounts stored with a sequential field layout."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .binary import Reader, Writer, check_key
from .errors import InvalidAccountData
from .layout import (
    MAX_AUCTION_CACHE_SIZE,
    MAX_AUTHORITY_LOOKUP_SIZE,
    MAX_PAYOUT_TICKET_SIZE,
    MAX_PRIZE_TRACKING_TICKET_SIZE,
    MAX_STORE_INDEXER_SIZE,
    MAX_STORE_SIZE,
    MAX_WHITELISTED_CREATOR_SIZE,
    PUBKEY_SIZE,
    Key,
)

ZERO_PUBKEY = bytes(PUBKEY_SIZE)


def _read_key(reader: Reader) -> Key:
    value = reader.u8()
    try:
        return Key(value)
    except ValueError:
        raise InvalidAccountData(f"unknown account kind {value}") from None


def _padded(writer: Writer, size: int) -> bytes:
    raw = writer.getvalue()
    if len(raw) > size:
        raise ValueError(f"{len(raw)} bytes do not fit in an account of {size} bytes")
    return raw + bytes(size - len(raw))


@dataclass(kw_only=True)
class Store:
    """A marketplace store and the programs it trusts."""

    SIZE: ClassVar[int] = MAX_STORE_SIZE

    key: Key = Key.StoreV1
    public: bool = False
    auction_program: bytes = ZERO_PUBKEY
    token_vault_program: bytes = ZERO_PUBKEY
    token_metadata_program: bytes = ZERO_PUBKEY
    token_program: bytes = ZERO_PUBKEY

    @classmethod
    def from_bytes(cls, data) -> Store:
        check_key(data, Key.StoreV1, cls.SIZE)
        reader = Reader(data)
        return cls(
            key=_read_key(reader),
            public=reader.bool(),
            auction_program=reader.pubkey(),
            token_vault_program=reader.pubkey(),
            token_metadata_program=reader.pubkey(),
            token_program=reader.pubkey(),
        )

    def to_bytes(self) -> bytes:
        writer = Writer()
        writer.u8(self.key)
        writer.bool(self.public)
        writer.pubkey(self.auction_program)
        writer.pubkey(self.token_vault_program)
        writer.pubkey(self.token_metadata_program)
        writer.pubkey(self.token_program)
        return _padded(writer, self.SIZE)


@dataclass(kw_only=True)
class WhitelistedCreator:
    """A creator a store allows, and whether the allowance is active."""

    SIZE: ClassVar[int] = MAX_WHITELISTED_CREATOR_SIZE

    key: Key = Key.WhitelistedCreatorV1
    address: bytes = ZERO_PUBKEY
    activated: bool = False

    @classmethod
    def from_bytes(cls, data) -> WhitelistedCreator:
        check_key(data, Key.WhitelistedCreatorV1, cls.SIZE)
        reader = Reader(data)
        return cls(key=_read_key(reader), address=reader.pubkey(), activated=reader.bool())

    def to_bytes(self) -> bytes:
        writer = Writer()
        writer.u8(self.key)
        writer.pubkey(self.address)
        writer.bool(self.activated)
        return _padded(writer, self.SIZE)


@dataclass(kw_only=True)
class PayoutTicket:
    """Record of how much a recipient has been paid."""

    SIZE: ClassVar[int] = MAX_PAYOUT_TICKET_SIZE

    key: Key = Key.PayoutTicketV1
    recipient: bytes = ZERO_PUBKEY
    amount_paid: int = 0

    @classmethod
    def from_bytes(cls, data) -> PayoutTicket:
        check_key(data, Key.PayoutTicketV1, cls.SIZE)
        reader = Reader(data)
        return cls(key=_read_key(reader), recipient=reader.pubkey(), amount_paid=reader.u64())

    def to_bytes(self) -> bytes:
        writer = Writer()
        writer.u8(self.key)
        writer.pubkey(self.recipient)
        writer.u64(self.amount_paid)
        return _padded(writer, self.SIZE)


@dataclass(kw_only=True)
class OriginalAuthorityLookup:
    """Remembers who held an authority before it was handed to the auction."""

    SIZE: ClassVar[int] = MAX_AUTHORITY_LOOKUP_SIZE

    key: Key = Key.OriginalAuthorityLookupV1
    original_authority: bytes = ZERO_PUBKEY

    @classmethod
    def from_bytes(cls, data) -> OriginalAuthorityLookup:
        check_key(data, Key.OriginalAuthorityLookupV1, cls.SIZE)
        reader = Reader(data)
        return cls(key=_read_key(reader), original_authority=reader.pubkey())

    def to_bytes(self) -> bytes:
        writer = Writer()
        writer.u8(self.key)
        writer.pubkey(self.original_authority)
        return _padded(writer, self.SIZE)


@dataclass(kw_only=True)
class StoreIndexer:
    """One page of a store's auction caches, newest first."""

    SIZE: ClassVar[int] = MAX_STORE_INDEXER_SIZE

    key: Key = Key.StoreIndexerV1
    store: bytes = ZERO_PUBKEY
    page: int = 0
    auction_caches: list[bytes] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data) -> StoreIndexer:
        check_key(data, Key.StoreIndexerV1, cls.SIZE)
        reader = Reader(data)
        return cls(
            key=_read_key(reader),
            store=reader.pubkey(),
            page=reader.u64(),
            auction_caches=reader.pubkey_vec(),
        )

    def to_bytes(self) -> bytes:
        writer = Writer()
        writer.u8(self.key)
        writer.pubkey(self.store)
        writer.u64(self.page)
        writer.pubkey_vec(self.auction_caches)
        return _padded(writer, self.SIZE)


@dataclass(kw_only=True)
class AuctionCache:
    """Keys an indexer needs to show one auction without further lookups."""

    SIZE: ClassVar[int] = MAX_AUCTION_CACHE_SIZE

    key: Key = Key.AuctionCacheV1
    store: bytes = ZERO_PUBKEY
    timestamp: int = 0
    metadata: list[bytes] = field(default_factory=list)
    auction: bytes = ZERO_PUBKEY
    vault: bytes = ZERO_PUBKEY
    auction_manager: bytes = ZERO_PUBKEY

    @classmethod
    def from_bytes(cls, data) -> AuctionCache:
        check_key(data, Key.AuctionCacheV1, cls.SIZE)
        reader = Reader(data)
        return cls(
            key=_read_key(reader),
            store=reader.pubkey(),
            timestamp=reader.i64(),
            metadata=reader.pubkey_vec(),
            auction=reader.pubkey(),
            vault=reader.pubkey(),
            auction_manager=reader.pubkey(),
        )

    def to_bytes(self) -> bytes:
        writer = Writer()
        writer.u8(self.key)
        writer.pubkey(self.store)
        writer.i64(self.timestamp)
        writer.pubkey_vec(self.metadata)
        writer.pubkey(self.auction)
        writer.pubkey(self.vault)
        writer.pubkey(self.auction_manager)
        return _padded(writer, self.SIZE)


@dataclass(kw_only=True)
class PrizeTrackingTicket:
    """Counts edition redemptions against what an auction expects."""

    SIZE: ClassVar[int] = MAX_PRIZE_TRACKING_TICKET_SIZE

    key: Key = Key.PrizeTrackingTicketV1
    metadata: bytes = ZERO_PUBKEY
    supply_snapshot: int = 0
    expected_redemptions: int = 0
    redemptions: int = 0

    @classmethod
    def from_bytes(cls, data) -> PrizeTrackingTicket:
        check_key(data, Key.PrizeTrackingTicketV1, cls.SIZE)
        reader = Reader(data)
        return cls(
            key=_read_key(reader),
            metadata=reader.pubkey(),
            supply_snapshot=reader.u64(),
            expected_redemptions=reader.u64(),
            redemptions=reader.u64(),
        )

    def to_bytes(self) -> bytes:
        writer = Writer()
        writer.u8(self.key)
        writer.pubkey(self.metadata)
        writer.u64(self.supply_snapshot)
        writer.u64(self.expected_redemptions)
        writer.u64(self.redemptions)
        return _padded(writer, self.SIZE)