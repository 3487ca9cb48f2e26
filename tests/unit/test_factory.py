"""Unit tests for leakguard/service/protocol.py and leakguard/service/factory.py.

Tests:
  - NullSensitiveDataFilterService: satisfies the protocol, never matches
  - create_filter_service(): default / explicit regex / null / invalid backend
  - Backend name is case- and whitespace-insensitive
"""

from __future__ import annotations

import pytest

from leakguard.config import Config, FilterConfig
from leakguard.config_store import ConfigurationStore
from leakguard.service.factory import VALID_BACKENDS, create_filter_service
from leakguard.service.filter_service import SensitiveDataFilterService
from leakguard.service.protocol import NullSensitiveDataFilterService, SensitiveDataFilter

GITHUB_TOKEN = "ghp_" + "x" * 40


class TestNullService:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(NullSensitiveDataFilterService(), SensitiveDataFilter)

    def test_never_enabled(self) -> None:
        assert NullSensitiveDataFilterService().is_enabled() is False

    def test_no_active_patterns(self) -> None:
        assert NullSensitiveDataFilterService().get_active_patterns() == []

    @pytest.mark.asyncio
    async def test_never_matches(self) -> None:
        svc = NullSensitiveDataFilterService()
        assert await svc.check_for_sensitive_data(GITHUB_TOKEN) == []

    def test_invalidate_and_close_are_noops(self) -> None:
        svc = NullSensitiveDataFilterService()
        svc.invalidate_cache()
        svc.close()
        svc.close()


class TestCreateFilterService:
    def test_valid_backends(self) -> None:
        assert VALID_BACKENDS == frozenset({"regex", "null"})

    def test_default_is_regex(self, store: ConfigurationStore) -> None:
        svc = create_filter_service(store)
        assert isinstance(svc, SensitiveDataFilterService)
        svc.close()

    def test_explicit_regex(self, monkeypatch: pytest.MonkeyPatch, store: ConfigurationStore) -> None:
        monkeypatch.setenv("LEAKGUARD_FILTER_BACKEND", "regex")
        svc = create_filter_service(store)
        assert isinstance(svc, SensitiveDataFilterService)
        svc.close()

    def test_null_backend(self, monkeypatch: pytest.MonkeyPatch, store: ConfigurationStore) -> None:
        monkeypatch.setenv("LEAKGUARD_FILTER_BACKEND", "null")
        assert isinstance(create_filter_service(store), NullSensitiveDataFilterService)

    def test_backend_name_normalised(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LEAKGUARD_FILTER_BACKEND", "  NULL ")
        assert isinstance(create_filter_service(), NullSensitiveDataFilterService)

    def test_unknown_backend_exits(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("LEAKGUARD_FILTER_BACKEND", "presidio")
        with pytest.raises(SystemExit) as exc_info:
            create_filter_service()
        assert exc_info.value.code == 1
        assert "LEAKGUARD_FILTER_BACKEND" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_regex_service_uses_given_store(self, store: ConfigurationStore) -> None:
        svc = create_filter_service(store)
        matches = await svc.check_for_sensitive_data(GITHUB_TOKEN)
        assert [m.pattern_name for m in matches] == ["github-token"]
        svc.close()

    def test_store_built_from_load_config_when_omitted(self, monkeypatch: pytest.MonkeyPatch) -> None:
        config = Config(filter=FilterConfig(enabled=True, use_built_in_patterns=False))
        monkeypatch.setattr("leakguard.service.factory.load_config", lambda: config)
        svc = create_filter_service()
        assert svc.is_enabled() is True
        assert svc.get_active_patterns() == []
        svc.close()
