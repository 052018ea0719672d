from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from solsign.verification import codes

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestGenerateCode:
    def test_is_six_digits(self) -> None:
        for _ in range(200):
            code = codes.generate_code()
            assert len(code) == 6
            assert code.isdigit()
            assert codes.CODE_MIN <= int(code) <= codes.CODE_MAX

    def test_lower_bound(self) -> None:
        with patch("solsign.verification.codes.secrets.randbelow", return_value=0):
            assert codes.generate_code() == "100000"

    def test_upper_bound(self) -> None:
        with patch(
            "solsign.verification.codes.secrets.randbelow",
            return_value=codes.CODE_MAX - codes.CODE_MIN,
        ):
            assert codes.generate_code() == "999999"


class TestIsWellFormed:
    def test_accepts_six_digits(self) -> None:
        assert codes.is_well_formed("000000")

    def test_rejects_short_code(self) -> None:
        assert not codes.is_well_formed("12345")

    def test_rejects_letters(self) -> None:
        assert not codes.is_well_formed("12a456")

    def test_rejects_non_ascii_digits(self) -> None:
        assert not codes.is_well_formed("١٢٣٤٥٦")

    def test_rejects_trailing_newline(self) -> None:
        assert not codes.is_well_formed("123456\n")

    def test_rejects_none(self) -> None:
        assert not codes.is_well_formed(None)


class TestExpiry:
    def test_expiry_is_ttl_after_issue(self) -> None:
        assert codes.code_expiry(NOW, 15) == NOW + timedelta(minutes=15)

    def test_valid_at_expiry_instant(self) -> None:
        assert not codes.is_expired(NOW, NOW)

    def test_expired_strictly_after(self) -> None:
        assert codes.is_expired(NOW, NOW + timedelta(microseconds=1))

    def test_missing_expiry_counts_as_expired(self) -> None:
        assert codes.is_expired(None, NOW)


class TestCodesMatch:
    def test_equal_codes_match(self) -> None:
        assert codes.codes_match("123456", "123456")

    def test_different_codes_do_not_match(self) -> None:
        assert not codes.codes_match("123456", "000000")

    def test_no_expected_code(self) -> None:
        assert not codes.codes_match(None, "123456")

    def test_non_ascii_submission_does_not_match(self) -> None:
        assert not codes.codes_match("123456", "١٢٣٤٥٦")
