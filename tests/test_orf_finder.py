"""Tests for longest ORF detection."""

import pytest

from prositometry.error_handler import SequenceAlphabetError
from prositometry.models import OrfResult
from prositometry.orf_finder import find_longest_orf, invalid_characters, validate_alphabet


class TestFindLongestOrf:
    """Test cases for ORF finding."""

    def test_start_followed_by_stop(self):
        """Test that ATG immediately followed by a stop gives the peptide 'M'."""
        result = find_longest_orf("ATGTAA")

        assert result.has_orf is True
        assert result.peptide == "M"
        assert result.peptide_length == 1
        assert result.frame == 0
        assert result.start == 0

    def test_no_start_codon(self):
        """Test sequence without ATG."""
        result = find_longest_orf("CCCGGGTTTAAA")

        assert result.has_orf is False
        assert result.peptide == ""
        assert result.source_length == 12
        assert result.start is None

    def test_empty_sequence(self):
        result = find_longest_orf("")
        assert result.has_orf is False
        assert result.source_length == 0

    def test_simple_orf(self):
        """Test translation stops before the stop codon."""
        result = find_longest_orf("ATGAAATTTTAA")
        assert result.peptide == "MKF"

    def test_orf_without_stop_runs_to_last_complete_codon(self):
        """Test ORF reaching the sequence end."""
        result = find_longest_orf("ATGAAACC")
        assert result.has_orf is True
        assert result.peptide == "MK"

    def test_orf_in_second_frame(self):
        result = find_longest_orf("CATGGCCTGA")
        assert result.peptide == "MA"
        assert result.frame == 1
        assert result.start == 1

    def test_longest_orf_in_later_frame_wins(self):
        """Test the longest ORF across frames is reported."""
        result = find_longest_orf("GGATGAAAAAAAAATAA")
        assert result.peptide == "MKKK"
        assert result.frame == 2
        assert result.start == 2

    def test_tie_within_frame_keeps_leftmost(self):
        result = find_longest_orf("ATGAAATAAATGCCCTAA")
        assert result.peptide == "MK"
        assert result.start == 0

    def test_tie_across_frames_keeps_first_frame(self):
        """Test that frame 0 wins over frame 1 for equal lengths."""
        result = find_longest_orf("ATGAAATAACATGCCCTAG")
        assert result.peptide == "MK"
        assert result.frame == 0

    def test_longer_orf_after_stop_in_same_frame(self):
        result = find_longest_orf("ATGTAAATGAAAAAATAA")
        assert result.peptide == "MKK"
        assert result.start == 6

    def test_internal_methionine_does_not_restart(self):
        result = find_longest_orf("ATGATGAAATAA")
        assert result.peptide == "MMK"
        assert result.start == 0

    def test_all_stop_codons(self):
        for stop in ("TAA", "TAG", "TGA"):
            assert find_longest_orf(f"ATGGGC{stop}CCC").peptide == "MG"

    def test_deterministic(self):
        sequence = "ATGAAATAACATGCCCTAGGGATGAAAAAAAAATAA"
        assert find_longest_orf(sequence) == find_longest_orf(sequence)

    def test_unknown_nucleotides_translate_to_x(self):
        """Test tolerant handling of non-ACGT characters."""
        result = find_longest_orf("ATGNNNAAATAA")
        assert result.peptide == "MXK"

    def test_unknown_nucleotides_never_stop(self):
        result = find_longest_orf("ATGAAATNA")
        assert result.peptide == "MKX"

    def test_strict_mode_rejects_unknown_nucleotides(self):
        with pytest.raises(SequenceAlphabetError) as exc_info:
            find_longest_orf("ATGNNNAAATAA", strict=True)

        assert exc_info.value.invalid_characters == ("N",)
        assert exc_info.value.position == 3

    def test_strict_mode_accepts_clean_sequence(self):
        assert find_longest_orf("ATGAAATAA", strict=True).peptide == "MK"


class TestAlphabet:
    """Test cases for alphabet helpers."""

    def test_validate_alphabet(self):
        validate_alphabet("ACGTACGT")
        with pytest.raises(SequenceAlphabetError):
            validate_alphabet("ACGU")

    def test_lowercase_is_outside_alphabet(self):
        with pytest.raises(SequenceAlphabetError):
            validate_alphabet("acgt")

    def test_invalid_characters(self):
        assert invalid_characters("ANCGRN") == ["N", "R"]
        assert invalid_characters("ACGT") == []


class TestOrfResult:
    """Test cases for the OrfResult model."""

    def test_no_orf_cannot_carry_peptide(self):
        with pytest.raises(ValueError):
            OrfResult(has_orf=False, peptide="M", source_length=3)

    def test_empty(self):
        result = OrfResult.empty(10)
        assert result.has_orf is False
        assert result.peptide_length == 0
