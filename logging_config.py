# logging_config.py

import logging
import logging.handlers
from pathlib import Path
from typing import Optional, Union

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'


def setup_logging(level: Union[str, int] = "INFO",
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger with a console handler and, if `log_file`
    is given, a rotating file handler that records everything at DEBUG.
    """
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = numeric

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if log_file else level)

    # Re-running setup replaces our handlers instead of stacking them
    for h in list(root.handlers):
        if getattr(h, "_image_viewport", False):
            root.removeHandler(h)
            h.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console_handler._image_viewport = True
    root.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=10*1024*1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        file_handler._image_viewport = True
        root.addHandler(file_handler)

    return root
