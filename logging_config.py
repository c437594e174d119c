"""
Logging configuration for the dashboard MCP server.
Logs go to stderr and to a timestamped file under logs/.
"""

import logging
import sys
from pathlib import Path
from datetime import datetime

# Global state
main_logger = None


def setup_main_logging() -> logging.Logger:
    """Setup main server logging (startup, global events)"""
    global main_logger

    if main_logger is not None:
        return main_logger

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
    )

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.handlers.clear()

    # STDERR Handler (stdout belongs to the stdio transport)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.INFO)
    root_logger.addHandler(stderr_handler)

    # Main log file
    logs_dir = Path(__file__).parent / "logs"
    logs_dir.mkdir(exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    main_log_file = logs_dir / f"coldchain_mcp_{timestamp}.log"

    main_file_handler = logging.FileHandler(main_log_file, encoding="utf-8")
    main_file_handler.setFormatter(formatter)
    main_file_handler.setLevel(logging.INFO)
    root_logger.addHandler(main_file_handler)

    # Quiet libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    main_logger = logging.getLogger("coldchain_mcp")
    main_logger.info("🔧 Main logging initialized")

    return main_logger


def get_logger(name: str = "coldchain_mcp") -> logging.Logger:
    """Get logger - simplified version"""
    global main_logger
    if main_logger is None:
        main_logger = setup_main_logging()
    return logging.getLogger(name)


# Initialize
logger = setup_main_logging()
