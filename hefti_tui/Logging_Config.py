# Logging_Config.py
# Description: Configuration for logging
#
# Imports
import asyncio
import logging
import logging.handlers
import sys
#
# 3rd-Party Imports
from loguru import logger as loguru_logger
from textual.app import App
from textual.css.query import QueryError
from textual.logging import TextualHandler
from textual.widgets import RichLog
#
# Local Imports
from .Constants import LOG_DISPLAY_ID
from .config import get_cli_log_file_path, get_cli_setting
#
########################################################################################################################
#
# Functions:

LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s:%(lineno)d - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# --- Custom Logging Handler ---
class RichLogHandler(logging.Handler):
    """Feeds log lines into a RichLog widget via a queue drained on the UI loop."""
    def __init__(self, rich_log_widget: RichLog):
        super().__init__()
        self.rich_log_widget = rich_log_widget
        self.log_queue: asyncio.Queue = asyncio.Queue()
        self.setFormatter(logging.Formatter(
            "{asctime} [{levelname:<8}] {name}:{lineno:<4} : {message}",
            style="{", datefmt=LOG_DATE_FORMAT
        ))
        self._queue_processor_task = None

    def start_processor(self, app: App):
        """Starts the log queue processing task on the running loop."""
        if not self._queue_processor_task or self._queue_processor_task.done():
            try:
                loop = asyncio.get_running_loop()
                self._queue_processor_task = loop.create_task(
                    self._process_log_queue(),
                    name="RichLogProcessor"
                )
                logging.debug("RichLog queue processor task started.")
            except RuntimeError as e:
                logging.error(f"Failed to get running loop to start log processor: {e}")

    async def stop_processor(self):
        """Signals the queue processor task to stop and waits for it."""
        if self._queue_processor_task and not self._queue_processor_task.done():
            self._queue_processor_task.cancel()
            try:
                await self._queue_processor_task
            except asyncio.CancelledError:
                logging.debug("RichLog queue processor task cancelled successfully.")
            finally:
                self._queue_processor_task = None

    async def _process_log_queue(self):
        """Coroutine to process logs from the queue and write to the widget."""
        while True:
            message = await self.log_queue.get()
            if self.rich_log_widget.is_mounted:
                self.rich_log_widget.write(message)
            self.log_queue.task_done()

    def emit(self, record: logging.LogRecord):
        """Format the record and put it onto the async queue."""
        try:
            message = self.format(record)
            loop = getattr(self.rich_log_widget.app, "_loop", None)
            if loop is not None:
                loop.call_soon_threadsafe(self.log_queue.put_nowait, message)
        except Exception:
            self.handleError(record)


def _forward_loguru_to_logging(message) -> None:
    record = message.record
    level_mapping = {
        "TRACE": logging.DEBUG, "DEBUG": logging.DEBUG, "INFO": logging.INFO,
        "SUCCESS": logging.INFO, "WARNING": logging.WARNING, "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    std_level = level_mapping.get(record["level"].name, logging.INFO)
    std_logger = logging.getLogger(record["name"])
    if record["exception"]:
        std_logger.log(std_level, record["message"], exc_info=record["exception"])
    else:
        std_logger.log(std_level, record["message"])


def configure_application_logging(app_instance):
    """Sets up all logging handlers, including Loguru integration."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    # Loguru is what the modules log with; route it into the stdlib handlers below
    loguru_logger.remove()
    loguru_logger.add(_forward_loguru_to_logging, level="TRACE", format="{message}")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    log_level_str = str(get_cli_setting("general", "log_level", "INFO")).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    root_logger.setLevel(log_level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # --- Textual dev console ---
    textual_console_handler = TextualHandler()
    textual_console_handler.setLevel(log_level)
    textual_console_handler.setFormatter(formatter)
    root_logger.addHandler(textual_console_handler)

    # --- Logs panel ---
    try:
        log_display_widget = app_instance.query_one(f"#{LOG_DISPLAY_ID}", RichLog)
        if not app_instance._rich_log_handler:
            app_instance._rich_log_handler = RichLogHandler(log_display_widget)
        rich_log_level_str = str(get_cli_setting("logging", "rich_log_level", "DEBUG")).upper()
        app_instance._rich_log_handler.setLevel(getattr(logging, rich_log_level_str, logging.DEBUG))
        root_logger.addHandler(app_instance._rich_log_handler)
    except QueryError:
        logging.error(f"Failed to find #{LOG_DISPLAY_ID} widget for RichLogHandler setup.")
        app_instance._rich_log_handler = None

    # --- Rotating log file ---
    try:
        log_file_path = get_cli_log_file_path()
        max_bytes = int(get_cli_setting("logging", "log_max_bytes", 10485760))
        backup_count = int(get_cli_setting("logging", "log_backup_count", 5))
        file_log_level_str = str(get_cli_setting("logging", "file_log_level", "INFO")).upper()
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
        )
        file_handler.setLevel(getattr(logging, file_log_level_str, logging.INFO))
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logging.info(f"Standard Logging: Added RotatingFileHandler (File: '{log_file_path}').")
    except (OSError, ValueError) as e:
        print(f"WARNING: could not set up file logging: {e}", file=sys.stderr)

    # The root level must not filter out what the most verbose handler wants
    handler_levels = [h.level for h in root_logger.handlers if h.level > 0]
    if handler_levels and min(handler_levels) < root_logger.level:
        root_logger.setLevel(min(handler_levels))

    loguru_logger.info("Logging configured.")

#
# End of Logging_Config.py
#######################################################################################################################
