"""Tests for Settings.from_env."""

import pytest

from vrf_lottery.config import Settings
from vrf_lottery.project_constants import (
    DEFAULT_BEACON_URL,
    DEFAULT_ENTRY_FEE,
    DEFAULT_KEY_HASH,
    ROUND_DURATION_S,
)

_VARS = ("BEACON_URL", "VRF_KEY_HASH", "ENTRY_FEE_WEI", "ROUND_DURATION_S")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("vrf_lottery.config.load_dotenv", lambda: None)
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings.from_env()
        assert s.beacon_url == DEFAULT_BEACON_URL
        assert s.key_hash == DEFAULT_KEY_HASH
        assert s.entry_fee == DEFAULT_ENTRY_FEE
        assert s.round_duration_s == ROUND_DURATION_S

    def test_env_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BEACON_URL", "https://relay.test")
        monkeypatch.setenv("ENTRY_FEE_WEI", "5")
        monkeypatch.setenv("ROUND_DURATION_S", "60")
        s = Settings.from_env()
        assert (s.beacon_url, s.entry_fee, s.round_duration_s) == ("https://relay.test", 5, 60)

    def test_override_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BEACON_URL", "https://relay.test")
        assert Settings.from_env(beacon_url_override="https://cli.test").beacon_url == "https://cli.test"

    @pytest.mark.parametrize("value", ["abc", "0", "-3"])
    def test_bad_fee(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv("ENTRY_FEE_WEI", value)
        with pytest.raises(RuntimeError, match="ENTRY_FEE_WEI"):
            Settings.from_env()

    def test_bad_key_hash(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VRF_KEY_HASH", "0xnothex")
        with pytest.raises(RuntimeError, match="VRF_KEY_HASH"):
            Settings.from_env()
