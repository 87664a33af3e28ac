import pytest

from minify_tools.class_ids import (
    ALPHABET,
    ClassIdGenerator,
    create_id,
    encode_radix64,
    is_valid_id,
)


def test_encode_radix64_positional():
    assert encode_radix64(0) == "0"
    assert encode_radix64(10) == "A"
    assert encode_radix64(63) == "_"
    assert encode_radix64(64) == "10"
    assert encode_radix64(640) == "A0"


def test_encode_radix64_rejects_negative():
    with pytest.raises(ValueError):
        encode_radix64(-1)


@pytest.mark.parametrize("text", ["1a", "_a", "-a", "a-", "a_", ""])
def test_invalid_ids(text):
    assert not is_valid_id(text)


@pytest.mark.parametrize("text", ["A", "a0", "b-c", "Z_9"])
def test_valid_ids(text):
    assert is_valid_id(text)


def test_generator_skips_invalid_values():
    gen = ClassIdGenerator()
    ids = [gen.next_id() for _ in range(53)]
    assert ids[:52] == list(ALPHABET[10:62])
    # 62..639 all start with a digit or end with '-'/'_'
    assert ids[52] == "A0"
    assert gen.counter == 640


def test_generator_ids_unique_and_valid():
    gen = ClassIdGenerator()
    ids = [gen.next_id() for _ in range(5000)]
    assert len(set(ids)) == len(ids)
    assert all(is_valid_id(i) for i in ids)


def test_shared_generator_never_repeats():
    a = create_id()
    b = create_id()
    assert a != b
    assert is_valid_id(a) and is_valid_id(b)
