"""Logging configuration with console and rotating file handlers"""
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Session log files kept on disk (including the new one)
MAX_SESSION_LOGS = 5


def setup_logging(
    log_file: Optional[str] = "logs/kb-relevance.log",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG
) -> Optional[Path]:
    """
    Configure logging with two destinations:
    - Console: Brief logs (INFO by default)
    - File: Detailed logs (DEBUG by default) with rotation
    
    Rotation policy:
    - New log file per process start (timestamp-based naming)
    - Keep last 5 session files (older ones removed on startup)
    - Auto-rotate when file reaches 10MB
    
    Args:
        log_file: Base path to log file, None for console only
        console_level: Console logging level (INFO = brief)
        file_level: File logging level (DEBUG = per-document scores)
    
    Returns:
        Path of the session log file, or None when file logging is off
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything, filter in handlers
    
    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root_logger.addHandler(console_handler)
    
    if log_file is None:
        logging.info(f"Logging configured: console={logging.getLevelName(console_level)}, no file")
        return None
    
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    
    # Drop oldest session logs so that, with the new one, MAX_SESSION_LOGS remain
    existing_logs = sorted(log_path.parent.glob(f"{log_path.stem}_*.log"), reverse=True)  # Newest first
    for old_log in existing_logs[MAX_SESSION_LOGS - 1:]:
        try:
            old_log.unlink()
        except OSError as e:
            logging.getLogger(__name__).warning(f"Could not remove old log {old_log}: {e}")
    
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    session_log = log_path.parent / f"{log_path.stem}_{timestamp}.log"
    
    file_handler = RotatingFileHandler(
        session_log,
        mode='a',
        maxBytes=10*1024*1024,  # 10MB
        backupCount=10,
        encoding='utf-8'
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    root_logger.addHandler(file_handler)
    
    logging.info(f"Logging configured: console={logging.getLevelName(console_level)}, file={session_log} ({logging.getLevelName(file_level)})")
    return session_log
