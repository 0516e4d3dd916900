"""
Tests for logging system
"""

import pytest
from popit.core.logger import GameLogger, get_logger, init_logger

def test_logger_singleton():
    """Test that logger is a singleton."""
    logger1 = get_logger()
    logger2 = get_logger()
    assert logger1 is logger2

def test_logger_rejects_second_instance():
    """Test direct construction is refused once initialized."""
    get_logger()
    with pytest.raises(RuntimeError):
        GameLogger()

def test_logger_methods():
    """Test that all logging methods work."""
    logger = get_logger()
    
    logger.debug("Debug message")
    logger.info("Info message")
    logger.warning("Warning message")
    logger.error("Error message")
    
    assert logger.logger.name == "PopIt"

def test_logger_creates_log_file():
    """Test that logger creates log file."""
    logger = get_logger()
    log_dir = logger.log_dir
    
    assert log_dir.exists()
    assert log_dir.is_dir()
    
    log_files = list(log_dir.glob("popit_*.log"))
    assert len(log_files) > 0

def test_init_logger_custom_dir(tmp_path):
    """Test re-initializing after shutdown writes to the new directory."""
    GameLogger.shutdown()
    logger = init_logger(str(tmp_path / "logs"))
    logger.info("Written to custom dir")
    
    assert logger.log_dir == tmp_path / "logs"
    assert logger.log_file.exists()
    
    GameLogger.shutdown()
    assert GameLogger._instance is None

def test_audio_logger_is_child(caplog):
    """Test sound messages go through a PopIt child logger."""
    from popit.core.logger import get_audio_logger
    audio = get_audio_logger()
    assert audio.name == "PopIt.audio"
    assert audio.parent is get_logger().logger
    
    with caplog.at_level("WARNING", logger="PopIt.audio"):
        audio.warning("Pop variation skipped")
    assert any(r.name == "PopIt.audio" and "skipped" in r.message for r in caplog.records)
