import logging
import threading
import time
import webbrowser

from .config import Config, setup_logging
from .reports import LatestSeriesRenderer, ReportCoordinator
from .server import TimewiseServer
from .storage import JsonFileStorage
from .store import ActivityStore

logger = logging.getLogger(__name__)


class TimewiseApp:
    def __init__(self, data_file=None):
        self.storage = JsonFileStorage(data_file or Config.DATA_FILE)
        self.store = ActivityStore(self.storage)
        self.renderer = LatestSeriesRenderer()
        self.coordinator = ReportCoordinator(self.store, self.renderer)
        self.server = TimewiseServer(self.store, self.coordinator, self.renderer)

    def open_dashboard(self):
        url = f"http://{Config.HOST}:{Config.PORT}/api/report"
        try:
            webbrowser.open(url)
        except webbrowser.Error as e:
            logger.warning(f"Could not open browser: {e}")

    def _delayed_open(self):
        """Wait for server to be ready, then open dashboard"""
        time.sleep(2)
        self.open_dashboard()

    def run(self, open_browser=True):
        self.store.load()
        # Initial report so the charts endpoint has data before the first request
        self.coordinator.refresh()

        if open_browser:
            threading.Thread(target=self._delayed_open, daemon=True).start()

        # Start Server (Blocking)
        self.server.run()


def main():
    log_file = setup_logging()
    if log_file:
        logger.info(f"Logging to {log_file}")
    try:
        TimewiseApp().run()
    except KeyboardInterrupt:
        logger.info("Timewise stopped.")
    except Exception as e:
        logger.critical(f"Fatal Startup Error: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
