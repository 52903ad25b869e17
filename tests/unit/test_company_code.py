"""Tests for company code helpers."""

from datetime import datetime, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from src.lynkskill.core.company_code import (
    CODE_CHARS,
    MASKED_PLACEHOLDER,
    format_code_for_display,
    generate_code,
    get_time_until_expiry,
    is_code_expired,
    is_valid_code_format,
    mask_code,
    normalize_code,
    regeneration_wait_seconds,
)

pytestmark = pytest.mark.unit

NOW = datetime(2026, 3, 1, 12, 0, 0)


class TestGenerateCode:
    def test_generated_codes_are_valid(self):
        for _ in range(50):
            code = generate_code()
            assert is_valid_code_format(code)
            assert len(code) == 19
            assert all(c in CODE_CHARS for c in code.replace("-", ""))

    def test_mask_reveals_last_segment_only(self):
        code = generate_code()
        masked = mask_code(code)

        assert masked == f"****-****-****-{code[-4:]}"
        assert sum(c not in "*-" for c in masked) == 4

    def test_ambiguous_characters_excluded(self):
        assert not set("01OIL") & set(CODE_CHARS)
        assert len(CODE_CHARS) == 31


class TestNormalizeCode:
    @given(st.text())
    def test_idempotent(self, raw):
        once = normalize_code(raw)
        assert normalize_code(once) == once

    def test_inserts_dashes_and_uppercases(self):
        assert normalize_code(" abcd efgh jkmn pqrs ") == "ABCD-EFGH-JKMN-PQRS"
        assert normalize_code("abcd-efgh-jkmn-pqrs") == "ABCD-EFGH-JKMN-PQRS"

    def test_empty(self):
        assert normalize_code(None) == ""
        assert normalize_code("") == ""

    def test_excluded_characters_normalize_but_are_invalid(self):
        assert normalize_code("ABCD1234EFGH5678") == "ABCD-1234-EFGH-5678"
        assert not is_valid_code_format("ABCD1234EFGH5678")

    def test_wrong_shape_is_invalid(self):
        assert not is_valid_code_format("ABCD-EFGH-JKMN")
        assert not is_valid_code_format("ABCDE-FGH-JKMN-PQRS")
        assert not is_valid_code_format(None)


class TestDisplayAndMask:
    def test_format_for_display(self):
        assert format_code_for_display("abcdefghjkmnpqrs") == "ABCD-EFGH-JKMN-PQRS"
        assert format_code_for_display("nope") == ""

    def test_mask_invalid(self):
        assert mask_code("short") == MASKED_PLACEHOLDER
        assert mask_code(None) == MASKED_PLACEHOLDER


class TestExpiry:
    def test_no_expiry_never_expires(self):
        assert not is_code_expired(None, now=NOW)
        assert get_time_until_expiry(None, now=NOW) is None

    def test_one_millisecond_past_is_expired(self):
        assert is_code_expired(NOW - timedelta(milliseconds=1), now=NOW)
        assert not is_code_expired(NOW + timedelta(milliseconds=1), now=NOW)

    @pytest.mark.parametrize(
        ("delta", "expected"),
        [
            (timedelta(days=3, hours=2), "3 days remaining"),
            (timedelta(days=1, minutes=5), "1 day remaining"),
            (timedelta(hours=5, minutes=59), "5 hours remaining"),
            (timedelta(hours=1), "1 hour remaining"),
            (timedelta(minutes=42, seconds=10), "42 minutes remaining"),
            (timedelta(seconds=-1), "Expired"),
        ],
    )
    def test_time_until_expiry(self, delta, expected):
        assert get_time_until_expiry(NOW + delta, now=NOW) == expected


class TestRegenerationCooldown:
    def test_never_regenerated(self):
        assert regeneration_wait_seconds(None, now=NOW) == 0

    def test_within_cooldown_rounds_up(self):
        last = NOW - timedelta(minutes=2, milliseconds=500)
        assert regeneration_wait_seconds(last, now=NOW) == 180

    def test_after_cooldown(self):
        assert regeneration_wait_seconds(NOW - timedelta(minutes=5), now=NOW) == 0
        assert regeneration_wait_seconds(NOW - timedelta(hours=1), now=NOW) == 0

    def test_custom_cooldown(self):
        last = NOW - timedelta(seconds=10)
        assert regeneration_wait_seconds(last, now=NOW, cooldown=timedelta(seconds=30)) == 20
