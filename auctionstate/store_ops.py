"""Store-level account updates: stores, whitelisted creators, auction caches and indexes.

Every operation takes the account's bytes as a ``bytearray`` and updates it
in place. An empty buffer is treated as a freshly created account and is
first grown to the account's full size. The operation returns the decoded
account as it was saved.
"""

from __future__ import annotations

from typing import Optional

from .accounts import AuctionCache, Store, StoreIndexer, WhitelistedCreator, ZERO_PUBKEY
from .errors import ErrorCode, MetaplexError
from .layout import (
    MAX_AUCTION_CACHE_SIZE,
    MAX_INDEXED_ELEMENTS,
    MAX_METADATA_PER_CACHE,
    MAX_STORE_INDEXER_SIZE,
    MAX_STORE_SIZE,
    MAX_WHITELISTED_CREATOR_SIZE,
    PUBKEY_SIZE,
    Key,
)

_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def _b58decode_pubkey(text: str) -> bytes:
    value = 0
    for char in text:
        value = value * 58 + _BASE58_ALPHABET.index(char)
    leading = len(text) - len(text.lstrip("1"))
    body = value.to_bytes((value.bit_length() + 7) // 8, "big") if value else b""
    raw = bytes(leading) + body
    if len(raw) > PUBKEY_SIZE:
        raise ValueError(f"{text!r} does not decode to a public key")
    return bytes(PUBKEY_SIZE - len(raw)) + raw


SYSTEM_PROGRAM_ID = ZERO_PUBKEY
TOKEN_PROGRAM_ID = _b58decode_pubkey("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")


def _allocate_if_empty(data: bytearray, size: int) -> None:
    if len(data) == 0:
        data.extend(bytes(size))


def _save(data: bytearray, raw: bytes) -> None:
    data[:] = raw


def set_store(
    store_data: bytearray,
    public: bool,
    token_program: bytes,
    token_vault_program: bytes,
    token_metadata_program: bytes,
    auction_program: bytes,
) -> Store:
    """Create or update a store.

    Program keys are set only once: a key already set is never replaced.
    The token program must be the standard token program.
    """
    _allocate_if_empty(store_data, MAX_STORE_SIZE)
    store = Store.from_bytes(store_data)
    store.key = Key.StoreV1
    store.public = bool(public)

    if store.token_program == SYSTEM_PROGRAM_ID:
        store.token_program = bytes(token_program)
    if store.token_program != TOKEN_PROGRAM_ID:
        raise MetaplexError(ErrorCode.InvalidTokenProgram)

    if store.token_vault_program == SYSTEM_PROGRAM_ID:
        store.token_vault_program = bytes(token_vault_program)
    if store.token_metadata_program == SYSTEM_PROGRAM_ID:
        store.token_metadata_program = bytes(token_metadata_program)
    if store.auction_program == SYSTEM_PROGRAM_ID:
        store.auction_program = bytes(auction_program)

    _save(store_data, store.to_bytes())
    return store


def set_whitelisted_creator(
    creator_data: bytearray, creator: bytes, activated: bool
) -> WhitelistedCreator:
    """Create or update a store's whitelist entry for ``creator``."""
    _allocate_if_empty(creator_data, MAX_WHITELISTED_CREATOR_SIZE)
    entry = WhitelistedCreator.from_bytes(creator_data)
    entry.key = Key.WhitelistedCreatorV1
    entry.address = bytes(creator)
    entry.activated = bool(activated)
    _save(creator_data, entry.to_bytes())
    return entry


def set_auction_cache(
    cache_data: bytearray,
    store: bytes,
    auction: bytes,
    vault: bytes,
    auction_manager: bytes,
    metadata: bytes,
    timestamp: int,
) -> AuctionCache:
    """Add one metadata key to an auction's cache, creating the cache if needed.

    The store and timestamp are recorded only when the cache is created.
    """
    if len(cache_data) == 0:
        _allocate_if_empty(cache_data, MAX_AUCTION_CACHE_SIZE)
        cache = AuctionCache.from_bytes(cache_data)
        cache.timestamp = timestamp
        cache.store = bytes(store)
    else:
        cache = AuctionCache.from_bytes(cache_data)

    cache.key = Key.AuctionCacheV1
    cache.vault = bytes(vault)
    cache.auction_manager = bytes(auction_manager)
    cache.auction = bytes(auction)

    metadata_key = bytes(metadata)
    if len(cache.metadata) == MAX_METADATA_PER_CACHE:
        raise MetaplexError(ErrorCode.MaxMetadataCacheSizeReached)
    if metadata_key in cache.metadata:
        raise MetaplexError(ErrorCode.DuplicateKeyDetected)

    cache.metadata.append(metadata_key)
    _save(cache_data, cache.to_bytes())
    return cache


def _check_neighbour(
    neighbour: Optional[tuple[bytes, AuctionCache]], expected_key: bytes
) -> AuctionCache:
    if neighbour is None:
        raise MetaplexError(ErrorCode.ExpectedAboveAuctionCacheToBeProvided)
    key, neighbour_cache = neighbour
    if bytes(key) != expected_key:
        raise MetaplexError(ErrorCode.CacheMismatch)
    return neighbour_cache


def set_store_index(
    indexer_data: bytearray,
    store: bytes,
    page: int,
    offset: int,
    cache_key: bytes,
    cache: AuctionCache,
    above: Optional[tuple[bytes, AuctionCache]] = None,
    below: Optional[tuple[bytes, AuctionCache]] = None,
) -> StoreIndexer:
    """Insert ``cache_key`` at ``offset`` in a page of the store's index.

    The page is kept newest first: the entry at ``offset`` (``above``) must
    be no newer than ``cache``, and the entry before it (``below``) no
    older. When inserting just before the last entry, ``above`` is checked
    against the entry before the offset. ``above`` and ``below`` are
    (account key, cache) pairs. The page keeps at most its maximum number
    of entries, dropping the oldest.
    """
    _allocate_if_empty(indexer_data, MAX_STORE_INDEXER_SIZE)
    indexer = StoreIndexer.from_bytes(indexer_data)
    indexer.key = Key.StoreIndexerV1
    indexer.store = bytes(store)
    indexer.page = page

    caches = indexer.auction_caches
    if offset < 0 or offset > len(caches):
        raise MetaplexError(ErrorCode.InvalidCacheOffset)

    if caches and offset < len(caches) - 1:
        above_cache = _check_neighbour(above, caches[offset])
        if above_cache.timestamp > cache.timestamp:
            raise MetaplexError(ErrorCode.CacheAboveIsNewer)

    if offset > 0:
        used = above if offset == len(caches) - 1 else below
        below_cache = _check_neighbour(used, caches[offset - 1])
        if below_cache.timestamp < cache.timestamp:
            raise MetaplexError(ErrorCode.CacheBelowIsOlder)

    updated = caches[:offset] + [bytes(cache_key)]
    room = max(0, MAX_INDEXED_ELEMENTS - len(updated))
    updated.extend(caches[offset:][:room])

    indexer.auction_caches = updated
    _save(indexer_data, indexer.to_bytes())
    return indexer