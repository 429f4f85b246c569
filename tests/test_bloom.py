"""Behavioural tests for the word Bloom filter."""
import logging
import threading

import pytest

import wordbloom
from wordbloom import BloomFilter, tokenize
from wordbloom.hashing import create_hash_fns, decode_uvarint


@pytest.fixture
def bf():
    """Filter holding the two sample sentences."""
    bf = BloomFilter(100, 0.001)
    bf.add("aku mau makan")
    bf.add("aku mau mandi")
    return bf


@pytest.mark.parametrize(
    "sentence, tokens",
    [
        ("aku mau makan", ["aku", "mau", "makan"]),
        ("AKU Mau", ["aku", "mau"]),
        ("", [""]),
        ("a  b", ["a", "", "b"]),
        (" a ", ["", "a", ""]),
        ("tab\tstays", ["tab\tstays"]),
    ],
)
def test_tokenize(sentence, tokens):
    assert tokenize(sentence) == tokens


def test_added_sentences_are_found(bf):
    assert bf.check("aku mau makan")
    assert bf.check("aku mau mandi")
    assert "aku mau makan" in bf


def test_subset_of_words_is_found(bf):
    assert bf.check("aku mau")
    assert bf.check("mandi")


def test_words_are_checked_independently(bf):
    """Any sentence made of added words matches, even if never added verbatim."""
    assert bf.check("aku makan mandi")
    assert bf.check("mandi makan mau aku")


def test_case_insensitive():
    bf = BloomFilter(100, 0.001)
    bf.add("AKU MAU")
    assert bf.check("aku mau")
    assert bf.check("Aku Mau")


def test_empty_filter_matches_nothing():
    bf = BloomFilter(100, 0.01)
    assert not bf.check("aku")
    assert not bf.check("")
    assert bf.count() == 0


def test_empty_and_repeated_spaces():
    bf = BloomFilter(10, 0.1)
    bf.add("")
    assert bf.check("")
    assert bf.check("   ")


def test_empty_token_is_distinct_from_words():
    bf = BloomFilter(10, 0.1)
    bf.add("a  b")
    assert bf.check("")
    assert bf.check("b a")


def test_no_false_negatives():
    bf = BloomFilter(500, 0.01)
    sentences = [f"word{i} other{i * 7} tail" for i in range(500)]
    for s in sentences:
        bf.add(s)
        assert bf.check(s)
    for s in sentences:
        assert bf.check(s)


def test_false_positive_rate_is_bounded():
    """Unseen words rarely match a filter filled to capacity."""
    bf = BloomFilter(100, 0.01)
    for i in range(100):
        bf.add(f"seen{i}")
    hits = sum(bf.check(f"unseen{i}") for i in range(1000))
    assert hits < 250


def test_bits_are_monotonic():
    bf = BloomFilter(50, 0.05)
    before = bf.bits
    for i in range(50):
        bf.add(f"sentence number {i}")
        after = bf.bits
        assert all(a for b, a in zip(before, after) if b)
        before = after
    for i in range(50):
        bf.check(f"probe {i}")
    assert bf.bits == before


def test_add_sets_at_most_k_bits_per_word():
    bf = BloomFilter(100, 0.001)
    bf.add("aku")
    assert 1 <= bf.count() <= bf.k
    bf.add("aku")
    assert bf.count() <= bf.k


def test_positions_follow_hmac_varint():
    """Bit positions are the leading digest varint modulo m."""
    bf = BloomFilter(100, 0.001)
    assert list(bf.positions("aku")) == [67, 44, 772, 86, 378, 1099, 624, 284, 1173, 607]


def test_positions_match_hashers():
    bf = BloomFilter(100, 0.001)
    expected = [
        decode_uvarint(fn.digest("makan".encode())) % bf.m
        for fn in create_hash_fns(bf.k)
    ]
    assert list(bf.positions("makan")) == expected


def test_lone_surrogates_are_hashed():
    bf = wordbloom.new(10, 0.1)
    bf.add("ok \ud800")
    assert bf.check("ok \ud800")
    assert bf.check("\ud800")
    assert bf.count() > 0


def test_same_parameters_hash_identically():
    a = BloomFilter(100, 0.01)
    b = BloomFilter(100, 0.01)
    a.add("aku mau makan")
    b.add("aku mau makan")
    assert a.bits == b.bits


def test_single_bit_filter():
    bf = wordbloom.new(1, 0.5)
    assert bf.k == 1
    bf.add("anything")
    assert bf.check("anything")


def test_construction_logs_sizes(caplog):
    with caplog.at_level(logging.DEBUG, logger="wordbloom"):
        BloomFilter(100, 0.001)
    assert "m=1438 k=10" in caplog.text


def test_repr():
    assert repr(BloomFilter(100, 0.01)) == (
        "BloomFilter(m=959, k=7, capacity=100, error_rate=0.01)"
    )


def test_shared_filter_behind_lock():
    """Callers serialise access to a shared filter themselves."""
    bf = BloomFilter(1000, 0.01)
    lock = threading.Lock()

    def writer(n):
        for i in range(100):
            with lock:
                bf.add(f"t{n} w{i}")

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    for n in range(4):
        for i in range(100):
            assert bf.check(f"t{n} w{i}")
