import importlib
import logging

import contract_analyzer
from contract_analyzer.config import get_settings


def test_package_log_level_follows_dotenv(tmp_path, monkeypatch):
    monkeypatch.delenv("CONTRACT_ANALYZER_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("CONTRACT_ANALYZER_LOG_LEVEL=ERROR\n", encoding="utf-8")

    package_logger = logging.getLogger("contract_analyzer")
    previous_level = package_logger.level
    get_settings.cache_clear()
    try:
        importlib.reload(contract_analyzer)
        assert get_settings().log_level == "ERROR"
        assert package_logger.level == logging.ERROR
        assert len(package_logger.handlers) == 1
    finally:
        get_settings.cache_clear()
        package_logger.setLevel(previous_level)
