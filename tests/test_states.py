"""Tests for states.py – reference table lookups."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from states import STATE_FIPS, STATE_NAMES, is_known_state, state_for_fips, state_name  # noqa: E402


class TestReferenceTable:
    def test_fifty_states_plus_dc(self):
        assert len(STATE_NAMES) == 51
        assert "DC" in STATE_NAMES

    def test_fips_codes_unique(self):
        assert len(set(STATE_FIPS.values())) == len(STATE_FIPS)


class TestLookups:
    def test_known_state_case_insensitive(self):
        assert is_known_state("al")
        assert is_known_state(" TX ")
        assert not is_known_state("ZZ")

    def test_state_name(self):
        assert state_name("CA") == "California"
        assert state_name("ZZ") == "ZZ"

    def test_fips_padding(self):
        assert state_for_fips("06") == "CA"
        assert state_for_fips("6") == "CA"
        assert state_for_fips(48) == "TX"
        assert state_for_fips("99") is None
