import os
import sys
import logging
from datetime import datetime

class Config:
    if os.getenv("TIMEWISE_DATA_DIR"):
        BASE_DIR = os.path.expanduser(os.getenv("TIMEWISE_DATA_DIR"))
    elif getattr(sys, 'frozen', False):
        # Running as compiled exe: use system appropriate app data dir
        if sys.platform == 'win32':
            BASE_DIR = os.path.join(os.environ.get('APPDATA', '.'), 'Timewise')
        elif sys.platform == 'darwin':
             BASE_DIR = os.path.expanduser('~/Library/Application Support/Timewise')
        else:
             BASE_DIR = os.path.expanduser('~/.timewise')
    else:
        # Dev mode: use project root
        BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    DATA_FILE = os.path.join(BASE_DIR, "timewise_data.json")
    LOG_DIR = os.path.join(BASE_DIR, "logs")
    LOG_LEVEL = os.getenv("TIMEWISE_LOG_LEVEL", "INFO")

    # Single key the whole activity history is persisted under
    STORAGE_KEY = "timeAnalyzerActivities"

    HOST = "127.0.0.1"
    PORT = int(os.getenv("TIMEWISE_PORT", "5007"))

    DEFAULT_WINDOW = "week"
    TREND_DAYS = 14
    DAILY_SUMMARY_LIMIT = 7
    MAX_DAILY_MINUTES = 1440


def setup_logging(log_dir=None, level=None):
    """Log to a timestamped file AND stdout. Returns the log file path (or None)."""
    log_dir = log_dir or Config.LOG_DIR
    level = level or Config.LOG_LEVEL
    handlers = [logging.StreamHandler(sys.stdout)]
    log_file = None

    try:
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(log_dir, f'timewise_{timestamp}.log')
        handlers.append(logging.FileHandler(log_file))
    except OSError as e:
        print(f"Failed to setup file logging: {e}")

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(message)s',
        handlers=handlers
    )
    # Disable Flask banner
    logging.getLogger('werkzeug').setLevel(logging.ERROR)
    return log_file
