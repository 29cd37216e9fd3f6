import sys
import os

import pytest
from pydantic import ValidationError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from config import EngineSettings, get_settings


class TestEngineSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PAYMENTS_LOG_LEVEL", raising=False)
        monkeypatch.delenv("PAYMENTS_STRICT", raising=False)
        settings = EngineSettings(_env_file=None)
        assert settings.log_level == "WARNING"
        assert settings.strict is False

    def test_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("PAYMENTS_LOG_LEVEL", "debug")
        monkeypatch.setenv("PAYMENTS_STRICT", "true")
        settings = get_settings()
        assert settings.log_level == "DEBUG"
        assert settings.strict is True

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            EngineSettings(log_level="verbose")

    def test_non_boolean_strict_rejected(self):
        with pytest.raises(ValidationError):
            EngineSettings(strict="maybe")

    def test_dotenv_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("PAYMENTS_STRICT", raising=False)
        (tmp_path / ".env").write_text("PAYMENTS_STRICT=true\nPAYMENTS_OUTPUT=x\n")
        monkeypatch.chdir(tmp_path)

        assert get_settings().strict is True
