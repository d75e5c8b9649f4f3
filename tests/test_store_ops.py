import pytest

from auctionstate.accounts import AuctionCache, Store, StoreIndexer, WhitelistedCreator
from auctionstate.errors import ErrorCode, MetaplexError
from auctionstate.layout import (
    MAX_AUCTION_CACHE_SIZE,
    MAX_INDEXED_ELEMENTS,
    MAX_METADATA_PER_CACHE,
    MAX_STORE_INDEXER_SIZE,
    MAX_STORE_SIZE,
    MAX_WHITELISTED_CREATOR_SIZE,
    Key,
)
from auctionstate.store_ops import (
    TOKEN_PROGRAM_ID,
    set_auction_cache,
    set_store,
    set_store_index,
    set_whitelisted_creator,
)


def pk(n):
    return bytes([n]) * 32


# ---- set_store ----------------------------------------------------------


def test_token_program_id_decodes_to_known_bytes():
    assert TOKEN_PROGRAM_ID.hex() == (
        "06ddf6e1d765a193d9cbe146ceeb79ac1cb485ed5f5b37913a8cf5857eff00a9"
    )


def test_set_store_creates_account():
    data = bytearray()
    store = set_store(data, True, TOKEN_PROGRAM_ID, pk(2), pk(3), pk(4))
    assert len(data) == MAX_STORE_SIZE
    assert data[0] == Key.StoreV1
    assert Store.from_bytes(data) == store
    assert store.public is True
    assert store.token_vault_program == pk(2)
    assert store.token_metadata_program == pk(3)
    assert store.auction_program == pk(4)


def test_set_store_keys_are_set_once():
    data = bytearray()
    set_store(data, True, TOKEN_PROGRAM_ID, pk(2), pk(3), pk(4))
    store = set_store(data, False, pk(9), pk(7), pk(7), pk(7))
    assert store.public is False
    assert store.token_program == TOKEN_PROGRAM_ID
    assert store.token_vault_program == pk(2)
    assert store.auction_program == pk(4)
    assert Store.from_bytes(data) == store


def test_set_store_rejects_other_token_program():
    data = bytearray()
    with pytest.raises(MetaplexError) as info:
        set_store(data, True, pk(1), pk(2), pk(3), pk(4))
    assert info.value.code is ErrorCode.InvalidTokenProgram


def test_set_store_rejects_wrong_kind():
    data = bytearray(MAX_STORE_SIZE)
    data[0] = Key.AuctionCacheV1
    with pytest.raises(MetaplexError) as info:
        set_store(data, True, TOKEN_PROGRAM_ID, pk(2), pk(3), pk(4))
    assert info.value.code is ErrorCode.DataTypeMismatch


# ---- set_whitelisted_creator ---------------------------------------------


def test_whitelisted_creator_round_trip():
    data = bytearray()
    entry = set_whitelisted_creator(data, pk(5), True)
    assert len(data) == MAX_WHITELISTED_CREATOR_SIZE
    assert WhitelistedCreator.from_bytes(data) == entry
    assert entry.address == pk(5)
    assert entry.activated is True
    assert entry.key is Key.WhitelistedCreatorV1


def test_whitelisted_creator_can_be_deactivated():
    data = bytearray()
    set_whitelisted_creator(data, pk(5), True)
    entry = set_whitelisted_creator(data, pk(5), False)
    assert WhitelistedCreator.from_bytes(data).activated is False
    assert entry.activated is False


# ---- set_auction_cache ---------------------------------------------------


def test_auction_cache_created_with_store_and_timestamp():
    data = bytearray()
    cache = set_auction_cache(data, pk(1), pk(2), pk(3), pk(4), pk(10), 1000)
    assert len(data) == MAX_AUCTION_CACHE_SIZE
    assert AuctionCache.from_bytes(data) == cache
    assert cache.store == pk(1)
    assert cache.timestamp == 1000
    assert cache.metadata == [pk(10)]
    assert (cache.auction, cache.vault, cache.auction_manager) == (pk(2), pk(3), pk(4))


def test_auction_cache_keeps_original_timestamp_and_store():
    data = bytearray()
    set_auction_cache(data, pk(1), pk(2), pk(3), pk(4), pk(10), 1000)
    cache = set_auction_cache(data, pk(9), pk(2), pk(3), pk(4), pk(11), 2000)
    assert cache.timestamp == 1000
    assert cache.store == pk(1)
    assert cache.metadata == [pk(10), pk(11)]


def test_auction_cache_rejects_duplicate():
    data = bytearray()
    set_auction_cache(data, pk(1), pk(2), pk(3), pk(4), pk(10), 1)
    with pytest.raises(MetaplexError) as info:
        set_auction_cache(data, pk(1), pk(2), pk(3), pk(4), pk(10), 1)
    assert info.value.code is ErrorCode.DuplicateKeyDetected


def test_auction_cache_is_bounded():
    data = bytearray()
    for n in range(MAX_METADATA_PER_CACHE):
        set_auction_cache(data, pk(1), pk(2), pk(3), pk(4), pk(100 + n), 1)
    with pytest.raises(MetaplexError) as info:
        set_auction_cache(data, pk(1), pk(2), pk(3), pk(4), pk(200), 1)
    assert info.value.code is ErrorCode.MaxMetadataCacheSizeReached
    assert len(AuctionCache.from_bytes(data).metadata) == MAX_METADATA_PER_CACHE


# ---- set_store_index -----------------------------------------------------


def cache_at(timestamp):
    return AuctionCache(timestamp=timestamp)


def indexer_bytes(keys):
    return bytearray(StoreIndexer(store=pk(1), auction_caches=list(keys)).to_bytes())


def test_store_index_first_entry():
    data = bytearray()
    indexer = set_store_index(data, pk(1), 3, 0, pk(50), cache_at(5))
    assert len(data) == MAX_STORE_INDEXER_SIZE
    assert StoreIndexer.from_bytes(data) == indexer
    assert indexer.auction_caches == [pk(50)]
    assert indexer.page == 3
    assert indexer.store == pk(1)


def test_store_index_insert_at_top_of_single():
    data = indexer_bytes([pk(50)])
    indexer = set_store_index(data, pk(1), 0, 0, pk(51), cache_at(9))
    assert indexer.auction_caches == [pk(51), pk(50)]


def test_store_index_append_checks_below():
    data = indexer_bytes([pk(50)])
    indexer = set_store_index(
        data, pk(1), 0, 1, pk(51), cache_at(3), below=(pk(50), cache_at(5))
    )
    assert indexer.auction_caches == [pk(50), pk(51)]


def test_store_index_below_older_rejected():
    data = indexer_bytes([pk(50)])
    with pytest.raises(MetaplexError) as info:
        set_store_index(data, pk(1), 0, 1, pk(51), cache_at(9), below=(pk(50), cache_at(5)))
    assert info.value.code is ErrorCode.CacheBelowIsOlder


def test_store_index_offset_too_large():
    data = indexer_bytes([pk(50)])
    with pytest.raises(MetaplexError) as info:
        set_store_index(data, pk(1), 0, 2, pk(51), cache_at(1))
    assert info.value.code is ErrorCode.InvalidCacheOffset


def test_store_index_requires_above():
    data = indexer_bytes([pk(50), pk(49)])
    with pytest.raises(MetaplexError) as info:
        set_store_index(data, pk(1), 0, 0, pk(51), cache_at(9))
    assert info.value.code is ErrorCode.ExpectedAboveAuctionCacheToBeProvided


def test_store_index_above_mismatch():
    data = indexer_bytes([pk(50), pk(49)])
    with pytest.raises(MetaplexError) as info:
        set_store_index(data, pk(1), 0, 0, pk(51), cache_at(9), above=(pk(49), cache_at(1)))
    assert info.value.code is ErrorCode.CacheMismatch


def test_store_index_above_newer_rejected():
    data = indexer_bytes([pk(50), pk(49)])
    with pytest.raises(MetaplexError) as info:
        set_store_index(data, pk(1), 0, 0, pk(51), cache_at(1), above=(pk(50), cache_at(9)))
    assert info.value.code is ErrorCode.CacheAboveIsNewer


def test_store_index_insert_before_last_uses_above_for_below():
    data = indexer_bytes([pk(50), pk(49)])
    indexer = set_store_index(
        data, pk(1), 0, 1, pk(51), cache_at(5), above=(pk(50), cache_at(7))
    )
    assert indexer.auction_caches == [pk(50), pk(51), pk(49)]
    assert StoreIndexer.from_bytes(data).auction_caches == indexer.auction_caches


def test_store_index_drops_oldest_when_full():
    keys = [bytes([n % 256, n // 256]) * 16 for n in range(MAX_INDEXED_ELEMENTS)]
    data = indexer_bytes(keys)
    new_key = pk(255)
    indexer = set_store_index(
        data, pk(1), 0, 0, new_key, cache_at(9), above=(keys[0], cache_at(1))
    )
    assert len(indexer.auction_caches) == MAX_INDEXED_ELEMENTS
    assert indexer.auction_caches[0] == new_key
    assert indexer.auction_caches[1:] == keys[:-1]