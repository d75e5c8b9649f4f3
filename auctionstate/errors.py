"""Errors raised while reading, checking and updating auction accounts."""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Reasons an auction account operation can be refused."""

    DataTypeMismatch = "Data type mismatch"
    InvalidOperation = "Invalid operation"
    NumericalOverflowError = "Numerical overflow error"
    InvalidEditionNumber = "Invalid edition number"
    NotEligibleForParticipation = "Not eligible for participation"
    PrintingAuthorizationTokenAccountMismatch = (
        "Printing authorization token account mismatch"
    )
    NotAllBidsClaimed = "Not all bids have been claimed"
    NoTokensForThisWinner = "No tokens for this winner"
    WinnerIndexNotFound = "Winner index not found"
    BidAlreadyRedeemed = "Bid already redeemed"
    WrongBidEndpointForPrize = "Wrong bid endpoint for prize"
    MaxMetadataCacheSizeReached = "Max metadata cache size reached"
    DuplicateKeyDetected = "Duplicate key detected"
    InvalidCacheOffset = "Invalid cache offset"
    CacheMismatch = "Cache mismatch"
    CacheAboveIsNewer = "Cache above is newer"
    CacheBelowIsOlder = "Cache below is older"
    ExpectedAboveAuctionCacheToBeProvided = "Expected above auction cache to be provided"
    InvalidSafetyDepositBox = "Invalid safety deposit box"
    InvalidSystemProgram = "Invalid system program"
    InvalidTokenProgram = "Invalid token program"


class MetaplexError(Exception):
    """An auction operation failed for the reason given by ``code``."""

    def __init__(self, code: ErrorCode) -> None:
        if not isinstance(code, ErrorCode):
            raise TypeError(f"expected an ErrorCode, got {code!r}")
        super().__init__(code.value)
        self.code = code

    def __repr__(self) -> str:
        return f"MetaplexError({self.code.name})"


class InvalidAccountData(ValueError):
    """Account bytes hold a value that no known field allows."""