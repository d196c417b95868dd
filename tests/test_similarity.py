"""Tests for address poisoning detection."""

from safeshield.similarity import (
    SimilarityConfig,
    detect_similar_addresses,
    get_bucket_key,
    get_middle_section,
    hamming_distance,
)

PREFIX = "123456"
SUFFIX = "abcd"


def _addr(middle: str) -> str:
    assert len(middle) == 30
    return "0x" + PREFIX + middle + SUFFIX


LEGIT = _addr("0" * 30)
POISON = _addr("0" * 27 + "fff")
FAR = _addr("f" * 30)
OTHER = "0x" + "9" * 40


def test_bucket_key_and_middle():
    assert get_bucket_key(LEGIT.upper().replace("0X", "0x"), 6, 4) == "123456_abcd"
    assert get_middle_section(LEGIT, 6, 4) == "0" * 30


def test_hamming_distance():
    assert hamming_distance("abc", "abd") == 1
    assert hamming_distance("abc", "abc") == 0
    assert hamming_distance("abc", "abcd") == 4


def test_look_alikes_are_grouped():
    result = detect_similar_addresses([LEGIT, OTHER, POISON])

    assert len(result.groups) == 1
    group = result.groups[0]
    assert group.bucket_key == "123456_abcd"
    assert group.addresses == [LEGIT, POISON]
    assert result.is_flagged(LEGIT)
    assert result.is_flagged(POISON.upper().replace("0X", "0x"))
    assert not result.is_flagged(OTHER)
    assert result.get_group(POISON) is group
    assert result.get_group(OTHER) is None


def test_same_ends_but_distant_middle_is_not_flagged():
    result = detect_similar_addresses([LEGIT, FAR])
    assert result.groups == []
    assert result.address_to_groups == {}


def test_threshold_is_configurable():
    result = detect_similar_addresses([LEGIT, FAR], SimilarityConfig(hamming_threshold=30))
    assert [g.addresses for g in result.groups] == [[LEGIT, FAR]]


def test_case_variants_are_one_address():
    result = detect_similar_addresses([LEGIT, LEGIT.upper().replace("0X", "0x")])
    assert result.groups == []


def test_non_strings_and_empty_input_are_ignored():
    assert detect_similar_addresses([]).groups == []
    assert detect_similar_addresses(None).groups == []
    assert detect_similar_addresses([LEGIT, None, 5, POISON]).is_flagged(POISON)


def test_poisoned_address_with_shared_ends_is_flagged():
    legit = "0x1234567890abcdef1234567890abcdef12345678"
    poisoned = "0x123456eeeeeeeeee1234567890abcdef12345678"
    distant = "0x123456" + "f" * 30 + "5678"

    result = detect_similar_addresses([legit, poisoned, distant])

    assert len(result.groups) == 1
    assert result.groups[0].bucket_key == "123456_5678"
    assert result.groups[0].addresses == [legit, poisoned]
    assert result.is_flagged(legit) and result.is_flagged(poisoned)
    assert not result.is_flagged(distant)


def test_single_address_yields_no_groups():
    assert detect_similar_addresses(["0x1234567890abcdef1234567890abcdef12345678"]).groups == []


def test_repeated_addresses_do_not_form_a_group():
    result = detect_similar_addresses([LEGIT, LEGIT, LEGIT])
    assert result.groups == []
    assert not result.is_flagged(LEGIT)
