import pytest

from auctionstate.errors import ErrorCode, MetaplexError
from auctionstate.layout import Key
from auctionstate.redemption import check_ticket, get_index_and_mask, save_ticket
from auctionstate.safety_config import SafetyDepositConfig

MANAGER = bytes(range(1, 33))


def _config(order):
    config = SafetyDepositConfig(order=order)
    buf = bytearray(config.created_size())
    config.write(buf, MANAGER)
    return bytes(buf)


def test_check_rejects_unknown_kind():
    data = bytearray(60)
    data[0] = Key.StoreV1
    with pytest.raises(MetaplexError) as info:
        check_ticket(data, False, _config(0))
    assert info.value.code is ErrorCode.DataTypeMismatch


def test_v1_participation_redeemed():
    data = bytearray([Key.BidRedemptionTicketV1, 1, 0])
    assert check_ticket(data, False, None) is None
    with pytest.raises(MetaplexError) as info:
        check_ticket(data, True, None)
    assert info.value.code is ErrorCode.BidAlreadyRedeemed


def test_save_v1_on_uninitialized_for_v1_manager():
    data = bytearray(3)
    save_ticket(data, True, None, None, MANAGER, Key.AuctionManagerV1)
    assert data == bytearray([Key.BidRedemptionTicketV1, 1, 0])


def test_save_v1_without_participation_leaves_flag():
    data = bytearray([Key.BidRedemptionTicketV1, 0, 0])
    save_ticket(data, False, None, None, MANAGER, Key.AuctionManagerV2)
    assert data == bytearray([Key.BidRedemptionTicketV1, 0, 0])


def test_save_v2_with_winner_index():
    data = bytearray(80)
    config = _config(3)
    save_ticket(data, False, config, 5, MANAGER, Key.AuctionManagerV2)
    assert data[0] == Key.BidRedemptionTicketV2
    assert data[1] == 1
    assert int.from_bytes(data[2:10], "little") == 5
    assert bytes(data[10:42]) == MANAGER
    position, mask = get_index_and_mask(data, 3)
    assert data[position] & mask == mask
    with pytest.raises(MetaplexError) as info:
        check_ticket(data, False, config)
    assert info.value.code is ErrorCode.BidAlreadyRedeemed


def test_save_v2_without_winner_index():
    data = bytearray(80)
    save_ticket(data, False, _config(0), None, MANAGER, Key.AuctionManagerV2)
    assert data[1] == 0
    assert bytes(data[2:34]) == MANAGER


def test_save_v2_requires_config():
    data = bytearray(80)
    with pytest.raises(MetaplexError) as info:
        save_ticket(data, False, None, None, MANAGER, Key.AuctionManagerV2)
    assert info.value.code is ErrorCode.InvalidOperation


def test_check_v2_requires_config():
    data = bytearray(80)
    data[0] = Key.BidRedemptionTicketV2
    with pytest.raises(MetaplexError) as info:
        check_ticket(data, False, None)
    assert info.value.code is ErrorCode.InvalidOperation


def test_orders_are_tracked_independently():
    data = bytearray(80)
    save_ticket(data, False, _config(3), None, MANAGER, Key.AuctionManagerV2)
    assert check_ticket(data, False, _config(4)) is None
    save_ticket(data, False, _config(4), None, MANAGER, Key.AuctionManagerV2)
    for order in (3, 4):
        with pytest.raises(MetaplexError) as info:
            check_ticket(data, False, _config(order))
        assert info.value.code is ErrorCode.BidAlreadyRedeemed


def test_index_and_mask_positions():
    with_winner = bytearray([Key.BidRedemptionTicketV2, 1])
    without_winner = bytearray([Key.BidRedemptionTicketV2, 0])
    assert get_index_and_mask(with_winner, 0) == (42, 128)
    assert get_index_and_mask(without_winner, 0)[0] == 34
    assert get_index_and_mask(with_winner, 7)[1] == 1
    first_pos, first_mask = get_index_and_mask(with_winner, 0)
    assert get_index_and_mask(with_winner, 8) == (first_pos + 1, first_mask)