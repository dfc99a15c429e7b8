"""
Unit tests for the main module — composition root.

Tests verify structlog configuration, the verifier wiring and the
startup path of main() without starting a real server.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import structlog
from railway import ErrorCode, ResultAssertions

from fnmt_auth import main as main_module
from fnmt_auth.config import AppSettings
from fnmt_auth.domain.models import MatchKind
from fnmt_auth.main import configure_structlog, create_verifier
from tests.conftest import DNI, FULL_NAME, CertificateFactory, config_with


class TestConfigureStructlog:
    """Verify structlog configuration function."""

    def test_configure_structlog_sets_log_level(self) -> None:
        """
        GIVEN log_level="WARNING"
        WHEN configure_structlog is called
        THEN structlog is configured (no exception raised).
        """
        configure_structlog("WARNING")
        log = structlog.get_logger()
        assert log is not None

    def test_configure_structlog_defaults_to_info(self) -> None:
        configure_structlog()
        assert structlog.get_logger() is not None

    def test_configure_structlog_invalid_level_falls_back(self) -> None:
        """
        GIVEN an invalid log_level string
        WHEN configure_structlog is called
        THEN it falls back to INFO (no crash).
        """
        configure_structlog("NONEXISTENT")
        assert structlog.get_logger() is not None


class TestCreateVerifier:
    """The wired verifier only needs the presented certificates."""

    def test_authorizes_allowed_certificate(self, fnmt_certificate: bytes) -> None:
        verify = create_verifier(config_with(full_names=[FULL_NAME]))

        match = ResultAssertions.assert_success(verify([fnmt_certificate]))

        assert match.kind is MatchKind.FULL_NAME

    def test_rejects_foreign_certificate(self, make_certificate: CertificateFactory) -> None:
        verify = create_verifier(config_with(national_ids=[DNI]))

        result = verify([make_certificate(countries=("FR",))])

        ResultAssertions.assert_failure(result, ErrorCode.PROFILE_MISMATCH)

    def test_rejects_empty_chain(self) -> None:
        verify = create_verifier(config_with(national_ids=[DNI]))
        ResultAssertions.assert_failure(verify([]), ErrorCode.NO_CERTIFICATE)


class TestMain:
    """main() validates configuration before handing over to uvicorn."""

    @pytest.fixture(autouse=True)
    def _isolated_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("FNMT__NAMES", "FNMT__DNIS", "FNMT__NAMEDNIS", "SERVER__PORT", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setitem(AppSettings.model_config, "env_file", None)

    def test_exits_on_configuration_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        """
        GIVEN FNMT__NAMES set to an empty list
        WHEN main() is called
        THEN it exits with status 1 before starting the server.
        """
        run = MagicMock()
        monkeypatch.setattr(main_module.uvicorn, "run", run)
        monkeypatch.setenv("FNMT__NAMES", "[]")

        with pytest.raises(SystemExit) as exc_info:
            main_module.main()

        assert exc_info.value.code == 1
        assert "Configuration error" in capsys.readouterr().err
        run.assert_not_called()

    def test_starts_uvicorn_with_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        run = MagicMock()
        monkeypatch.setattr(main_module.uvicorn, "run", run)
        monkeypatch.setenv("FNMT__DNIS", f'["{DNI}"]')
        monkeypatch.setenv("SERVER__PORT", "9443")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        main_module.main()

        run.assert_called_once_with(
            "fnmt_auth.asgi:app", host="0.0.0.0", port=9443, log_level="warning",
        )
