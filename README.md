# auctionstate

Read, write and validate the binary account records of an NFT auction
manager: stores, whitelisted creators, payout tickets, authority lookups,
auction caches, store indexers, prize tracking tickets, safety deposit
configurations, winner token-type trackers, bid redemption tickets and
version 2 auction managers.

Everything works on plain `bytes` / `bytearray` account data. Public keys
are 32-byte `bytes` values throughout. This makes the package suited to
indexers, test harnesses and off-chain tools that have to decode or produce
these byte layouts.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `auctionstate.errors`: `ErrorCode`, an enum of refusal reasons;
  `MetaplexError`, raised with one of those codes (available as `.code`); and
  `InvalidAccountData`, a `ValueError` raised when account bytes hold a value
  no field allows.
- `auctionstate.layout`: the `Key`, `WinningConfigType`,
  `AuctionManagerStatus`, `WinningConstraint`, `NonWinningConstraint` and
  `TupleNumericType` enums, the account size constants, and
  `numeric_type_from_byte`, `read_number` and `write_number` for the
  variable-width little-endian integers stored in amount ranges.
- `auctionstate.binary`: `Reader` and `Writer` for sequential little-endian
  fields (`u8`, `bool`, `u32`, `u64`, `i64`, `pubkey`, `pubkey_vec`), and
  `check_key`. `check_key` raises `MetaplexError(DataTypeMismatch)` unless the
  data has exactly the expected size and starts with the expected key or with
  `Key.Uninitialized`.
- `auctionstate.accounts`: the dataclasses `Store`, `WhitelistedCreator`,
  `PayoutTicket`, `OriginalAuthorityLookup`, `StoreIndexer`, `AuctionCache`
  and `PrizeTrackingTicket`. Each has a `SIZE`, `from_bytes` and `to_bytes`,
  and `to_bytes` pads the result with zeros to `SIZE`.
- `auctionstate.safety_config`: `SafetyDepositConfig`, which has
  `from_bytes`, `write`, `save_participation_state` and `created_size`, and
  `AmountRange`, `ParticipationConfigV2`, `ParticipationStateV2` and
  `AmountCumulative`. There are also readers for single fields
  (`read_order`, `read_auction_manager`, `read_amount_type`,
  `read_length_type`, `read_amount_range_len`, `read_winning_config_type`) and
  `find_amount_and_cumulative_offset`, which works out what a given winner
  receives, how much all earlier winners receive, and a running total.
- `auctionstate.tracker`: `AuctionWinnerTokenTypeTracker`, which has
  `from_bytes`, `save`, `created_size` and
  `add_one_where_positive_ranges_occur`. The last merges a config's ranges
  into the tracker, adding one token type wherever the config gives something.
- `auctionstate.redemption`: `check_ticket`, `save_ticket` and
  `get_index_and_mask` for version 1 and version 2 bid redemption tickets and
  their per-deposit redemption bitmask.
- `auctionstate.auction_manager`: `AuctionManagerV2` (with
  `AuctionManagerStateV2`, `WinningIndexResult` and
  `PrintingV2CalculationResult`) and its checks against safety deposit
  configs and trackers. `get_auction_manager` decodes an account and accepts
  only version 2 managers.
- `auctionstate.store_ops`: `set_store`, `set_whitelisted_creator`,
  `set_auction_cache` and `set_store_index`. Each updates a `bytearray` in
  place and returns the decoded account. An empty buffer counts as a new
  account and is first grown to the full account size. The module also
  defines `SYSTEM_PROGRAM_ID` and `TOKEN_PROGRAM_ID`.

## Example

```python
from auctionstate.accounts import Store
from auctionstate.store_ops import TOKEN_PROGRAM_ID, set_store

data = bytearray()
store = set_store(
    data,
    public=True,
    token_program=TOKEN_PROGRAM_ID,
    token_vault_program=bytes([1]) * 32,
    token_metadata_program=bytes([2]) * 32,
    auction_program=bytes([3]) * 32,
)
assert len(data) == Store.SIZE
assert Store.from_bytes(data) == store
```

`set_store` sets each program key only while it is still all zeros. It raises
`MetaplexError(InvalidTokenProgram)` if the token program is not
`TOKEN_PROGRAM_ID`.

## What this package does not do

This package only handles account bytes and the rules that apply to them.
It does not connect to a network or submit transactions. It does not check
signers, account owners or program-derived addresses, and it does not move
tokens, mint editions or transfer metadata authority. Only version 2 auction
managers are supported. The package has no command-line interface.