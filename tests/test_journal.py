import pytest

from healthproof.codec import U128_MAX, decode_u128, encode_u128, from_hex, to_hex
from healthproof.errors import SerializationError
from healthproof.guest import GuestEnv, health_factor_main
from healthproof.inputs import HealthFactorInput
from healthproof.journal import JOURNAL_SIZE, JournalValues, commit_outputs, decode_journal, encode_journal


def test_u128_little_endian_layout():
    assert encode_u128(12345) == b"\x39\x30" + bytes(14)
    assert encode_u128(U128_MAX) == b"\xff" * 16
    assert decode_u128(b"\x01" + bytes(15)) == 1
    with pytest.raises(SerializationError):
        encode_u128(U128_MAX + 1)


def test_commit_order_is_fixed():
    env = GuestEnv(b"")
    commit_outputs(env, 3, 2, 1)
    assert env.journal == encode_u128(3) + encode_u128(2) + encode_u128(1)
    assert decode_journal(env.journal) == JournalValues(health_factor=3, collateral_value_usd=2, total_minted=1)


def test_guest_reads_minted_then_collateral():
    env = GuestEnv(HealthFactorInput(total_minted=1000, collateral_value_usd=4000).to_bytes())
    health_factor_main(env)
    assert len(env.journal) == JOURNAL_SIZE
    assert decode_journal(env.journal) == (2 * 10**18, 4000, 1000)
    assert env.remaining_words == 0


def test_guest_zero_debt_journal():
    env = GuestEnv(HealthFactorInput(total_minted=0, collateral_value_usd=12345).to_bytes())
    health_factor_main(env)
    assert env.journal == encode_journal(JournalValues(U128_MAX, 12345, 0))


def test_guest_read_past_end():
    env = GuestEnv(encode_u128(5))
    env.read_u128()
    with pytest.raises(SerializationError):
        env.read_u128()


def test_decode_journal_rejects_wrong_size():
    with pytest.raises(SerializationError):
        decode_journal(bytes(JOURNAL_SIZE - 1))
    with pytest.raises(SerializationError):
        decode_journal(bytes(JOURNAL_SIZE + 16))


def test_hex_helpers():
    assert to_hex(b"\x00\xab") == "0x00ab"
    assert to_hex(b"\x00\xab", prefixed=False) == "00ab"
    assert from_hex("0x00ab") == b"\x00\xab"
    for bad in ("00ab", "0x00AB", "0x0 ab", "0xabc"):
        with pytest.raises(SerializationError):
            from_hex(bad)


def test_input_word_layout():
    data = HealthFactorInput(total_minted=1000, collateral_value_usd=4000).to_bytes()
    assert data == b"\xe8\x03" + bytes(14) + b"\xa0\x0f" + bytes(14)
