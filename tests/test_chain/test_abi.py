"""Tests for ABI constants and address helpers."""

from eth_abi import decode, encode

from src.chain.abi import (
    TRANSFER_ARG_TYPES,
    TRANSFER_EVENT_TOPIC,
    TRANSFER_SELECTOR,
    address_to_topic,
    same_address,
)


def test_transfer_event_topic() -> None:
    assert TRANSFER_EVENT_TOPIC == (
        "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
    )


def test_transfer_selector() -> None:
    assert TRANSFER_SELECTOR == "a9059cbb"


def test_address_to_topic() -> None:
    topic = address_to_topic("0x000000000000000000000000000000000000dEaD")
    assert topic == "0x" + "0" * 60 + "dead"
    assert len(topic) == 66


def test_same_address() -> None:
    assert same_address("0xABCDEF0000000000000000000000000000000001", "0xabcdef0000000000000000000000000000000001")
    assert not same_address("0x01", "0x02")
    assert not same_address(None, "0x01")
    assert not same_address("", "")


def test_transfer_args_roundtrip_large_amount() -> None:
    amount = 2**255 + 12345
    payload = encode(TRANSFER_ARG_TYPES, ["0x000000000000000000000000000000000000dead", amount])
    recipient, decoded = decode(TRANSFER_ARG_TYPES, payload)
    assert recipient.lower() == "0x000000000000000000000000000000000000dead"
    assert decoded == amount
