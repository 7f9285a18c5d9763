"""
Tests for masking secrets in log records.
"""
from hockeyplots.logging.setup import mask_value, sensitive_data_filter


class TestSensitiveDataFilter:
    def test_top_level_secret_is_masked(self):
        record = {"message": "connecting", "extra": {"api_key": "abcd1234efgh5678", "team": "TBL"}}

        assert sensitive_data_filter(record)

        assert record["extra"]["api_key"] == "abcd****5678"
        assert record["extra"]["team"] == "TBL"

    def test_nested_secrets_are_masked(self):
        extra = {
            "request": {"headers": {"Authorization": "x", "apikey": "short"}, "url": "/teams"},
            "attempts": [{"token": "0123456789abcdef"}, {"season": "20232024"}],
        }

        masked = mask_value(extra)

        assert masked["request"]["headers"]["apikey"] == "********"
        assert masked["request"]["url"] == "/teams"
        assert masked["attempts"][0]["token"] == "0123****cdef"
        assert masked["attempts"][1]["season"] == "20232024"
        # The original extras are left as they were
        assert extra["attempts"][0]["token"] == "0123456789abcdef"

    def test_record_without_extra_is_kept(self):
        record = {"message": "plain"}
        assert sensitive_data_filter(record)
        assert record == {"message": "plain"}
