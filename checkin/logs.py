import logging
import os
import sys

FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def setup_logging(level=None):
    """Configure application logging.

    Streamlit re-executes the script on every interaction, so the handler is
    only attached once per process.
    """
    level = level or os.environ.get("CHECKIN_LOG_LEVEL", "INFO")

    logger = logging.getLogger()
    logger.setLevel(level)

    if not any(getattr(h, "_checkin", False) for h in logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        console_handler._checkin = True
        logger.addHandler(console_handler)

    # Silence noisy libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)
    return logger
