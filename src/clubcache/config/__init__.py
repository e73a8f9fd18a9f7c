"""Cache configuration"""

import logging
from dotenv import load_dotenv

from .loader import load_raw_config
from .client import ClientOptions

load_dotenv()

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_RAW_CONFIG = load_raw_config()

client = ClientOptions(_RAW_CONFIG)

logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT, level=client.LOG_LEVEL)
logging.getLogger("discord").setLevel(logging.WARNING)


__all__ = ["client", "ClientOptions", "load_raw_config", "LOG_FORMAT", "DATE_FORMAT"]
