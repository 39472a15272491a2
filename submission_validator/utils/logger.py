import logging, os, sys


_ROOT_LOGGER = "submission-validator"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(_ROOT_LOGGER)
    if root.handlers:
        return root
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    root.setLevel(level)
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(level)
    ch.setFormatter(logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(ch)
    return root


def get_logger(name: str | None = None) -> logging.Logger:
    """Named child of the service logger; the stdout handler lives on the parent only."""
    root = _configure_root()
    return root.getChild(name) if name else root
