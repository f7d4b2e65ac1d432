import sys

from loguru import logger

from .config import Config


VERBOSE = Config.VERBOSE
LOG_PATH = Config.LOG_PATH
LOG_LEVEL = Config.LOG_LEVEL
LOG_ROTATION = Config.LOG_ROTATION
LOG_RETENTION = Config.LOG_RETENTION


# Silent unless LOG_PATH or VERBOSE is set
logger.disable("qbittorrent_sdk")

# Log to a file
if LOG_PATH:
    logger.enable("qbittorrent_sdk")
    logger.add(
        LOG_PATH,
        rotation=LOG_ROTATION,
        retention=LOG_RETENTION,
        level=LOG_LEVEL,
        filter="qbittorrent_sdk",
    )

# Log to console
if VERBOSE:
    logger.enable("qbittorrent_sdk")
    logger.add(
        sys.stderr,
        level=LOG_LEVEL,
        filter="qbittorrent_sdk",
    )
