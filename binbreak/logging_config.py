import logging
import os


def configure_logging(default_level: int = logging.INFO) -> None:
    """Configure the root logger once for the game process.

    Respects BINBREAK_LOG_LEVEL if present.
    """
    level_name = os.getenv("BINBREAK_LOG_LEVEL")
    level = default_level
    if level_name:
        level = getattr(logging, level_name.upper(), default_level)
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )
