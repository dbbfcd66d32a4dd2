from __future__ import annotations

from fieldmatch import logger as package_logger
from fieldmatch.logging import configure_logging, get_logger
from fieldmatch.settings import Settings


def test_stdlib_logger_is_configured(capsys) -> None:
    configure_logging(settings=Settings(log_json=False, log_level="INFO"), force=True)
    logger = get_logger("tests")
    logger.info("hello")

    captured = capsys.readouterr()
    assert "hello" in captured.err.lower()


def test_log_file_is_created(tmp_path) -> None:
    log_file = tmp_path / "logs" / "fieldmatch.log"
    configure_logging(settings=Settings(log_file=str(log_file)), force=True)

    assert log_file.parent.is_dir()
    configure_logging(settings=Settings(log_json=False), force=True)


def test_package_logger_created_on_import() -> None:
    assert callable(getattr(package_logger, "info", None))
