import logging

from omnifocus_mcp.utils.config import get_config, get_settings, load_env_vars
from omnifocus_mcp.utils.logger import configure_logging, get_logger


def test_defaults(monkeypatch):
    for key in ("OFMCP_OSASCRIPT", "OFMCP_SCRIPT_DIR", "OFMCP_DOCUMENT", "OFMCP_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    settings = get_settings()
    assert settings.osascript == "osascript"
    assert settings.script_dir is None
    assert settings.document == "front document"
    assert settings.log_level == "INFO"


def test_blank_values_fall_back(monkeypatch):
    monkeypatch.setenv("OFMCP_OSASCRIPT", "   ")
    assert get_config("OFMCP_OSASCRIPT", "osascript") == "osascript"


def test_env_file_is_loaded_without_overriding(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("OFMCP_DOCUMENT", "default document")
    # setenv first so the value loaded from the file is removed on teardown
    monkeypatch.setenv("OFMCP_LOG_LEVEL", "placeholder")
    monkeypatch.delenv("OFMCP_LOG_LEVEL")
    (tmp_path / ".ofmcp.env").write_text("OFMCP_LOG_LEVEL=debug\nOFMCP_DOCUMENT=other\n")

    load_env_vars()
    settings = get_settings()
    assert settings.log_level == "DEBUG"
    assert settings.document == "default document"


def test_configure_logging_sets_package_level():
    configure_logging("DEBUG")
    assert logging.getLogger("omnifocus_mcp").level == logging.DEBUG
    configure_logging("WARNING")
    assert get_logger("omnifocus_mcp.test").getEffectiveLevel() == logging.WARNING
    configure_logging("INFO")
