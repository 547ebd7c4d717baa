"""
Unit tests for pronunciation variant generation.

Covers the merge rules, generation order, the input length/kana guard and
pitch marker placement.
"""

import pytest

from pronunciation.kana import to_katakana
from pronunciation.variants import (
    MAX_VARIANT_INPUT_LENGTH,
    PITCH_MARKER,
    generate_base_variants,
    generate_variants,
    pitch_marked_variants,
)


class TestBaseVariants:
    """Spelling variants before pitch markers."""

    def test_plain_reading_has_one_spelling(self):
        assert generate_base_variants("イク") == ["イク"]

    def test_double_o_always_collapses(self):
        assert generate_base_variants(to_katakana("おおきい")) == ["オーキイ"]

    def test_e_i_always_collapses(self):
        assert generate_base_variants(to_katakana("せんせい")) == ["センセー"]

    def test_o_u_branches_literal_first(self):
        assert generate_base_variants("コウ") == ["コウ", "コー"]

    def test_lone_u_branches_when_not_first(self):
        assert generate_base_variants("ウウ") == ["ウウ", "ウー"]

    def test_leading_u_is_kept(self):
        assert generate_base_variants("ウミ") == ["ウミ"]

    def test_o_u_choices_alternate_per_suffix(self):
        assert generate_base_variants(to_katakana("とうきょう")) == [
            "トウキョウ",
            "トーキョウ",
            "トウキョー",
            "トーキョー",
        ]

    def test_o_u_pairs_first_position_alternates_fastest(self):
        assert generate_base_variants("コウソウ") == [
            "コウソウ",
            "コーソウ",
            "コウソー",
            "コーソー",
        ]

    def test_lone_u_choice_takes_every_suffix(self):
        assert generate_base_variants("スウウ") == ["スウウ", "スウー", "スーウ", "スーー"]


class TestGenerateVariants:
    """Full variant sets including pitch markers."""

    def test_simple_reading(self):
        assert generate_variants("いく") == ["イク", "イ'ク"]

    def test_katakana_and_hiragana_input_agree(self):
        assert generate_variants("イク") == generate_variants("いく")

    def test_doubled_vowel_does_not_branch(self):
        variants = generate_variants("おおきい")
        assert variants == ["オーキイ", "オ'ーキイ", "オー'キイ", "オーキ'イ"]

    def test_o_u_position_doubles_output(self):
        merging = generate_variants("こうこ")
        non_merging = generate_variants("こあこ")
        assert len(merging) == 2 * len(non_merging)

    def test_each_base_yields_length_outputs(self):
        variants = generate_variants("とうきょう")
        bases = generate_base_variants("トウキョウ")
        assert len(variants) == sum(len(base) for base in bases)

    def test_output_order_unmarked_then_ascending_markers(self):
        assert generate_variants("ねこ") == ["ネコ", "ネ'コ"]
        assert generate_variants("さくら") == ["サクラ", "サ'クラ", "サク'ラ"]

    @pytest.mark.parametrize(
        "reading",
        [
            "あ" * (MAX_VARIANT_INPUT_LENGTH + 1),
            "ア" * 20,
        ],
    )
    def test_too_long_input_yields_nothing(self, reading):
        assert generate_variants(reading) == []

    def test_max_length_input_is_accepted(self):
        reading = "あ" * MAX_VARIANT_INPUT_LENGTH
        assert len(generate_variants(reading)) == MAX_VARIANT_INPUT_LENGTH

    @pytest.mark.parametrize("reading", ["", "猫", "ねこa", "行く", "ね こ"])
    def test_non_kana_input_yields_nothing(self, reading):
        assert generate_variants(reading) == []

    def test_bound_holds_for_worst_case(self):
        # Six o+u positions at the length cap: 2**6 bases of length 12
        reading = "こう" * 6
        variants = generate_variants(reading)
        assert len(variants) == (2 ** 6) * 12


class TestPitchMarkers:
    """Pitch marker placement."""

    def test_marker_never_after_last_character(self):
        for variant in pitch_marked_variants("トウキョウ"):
            assert not variant.endswith(PITCH_MARKER)
            assert not variant.startswith(PITCH_MARKER)

    def test_single_character_has_no_marked_variant(self):
        assert pitch_marked_variants("キ") == ["キ"]

    def test_marked_variants_reduce_to_their_base(self):
        for reading in ("とうきょう", "がっこう", "せんせい"):
            bases = set(generate_base_variants(to_katakana(reading)))
            for variant in generate_variants(reading):
                assert variant.count(PITCH_MARKER) <= 1
                assert variant.replace(PITCH_MARKER, "") in bases

    def test_generation_is_repeatable(self):
        assert generate_variants("がっこう") == generate_variants("がっこう")
