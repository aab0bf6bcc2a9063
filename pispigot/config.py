import logging


DEFAULT_DIGITS = 10000
DEFAULT_CHUNK_SIZE = 1000
DEFAULT_OUT = "pi"
ENV_PREFIX = "PISPIGOT"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(verbose: bool = False):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
