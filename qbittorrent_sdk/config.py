import os
import dotenv


dotenv.load_dotenv()


# Defaults
DEBUG = False
VERBOSE = False
LOG_PATH = ""
LOG_LEVEL = "INFO"
LOG_ROTATION = "1 week"
LOG_RETENTION = "1 month"

QBT_URL = "http://localhost:8080"
QBT_API_PATH = "/api/v2"
QBT_USERNAME = "admin"
QBT_PASSWORD = ""
QBT_TIMEOUT = 30


class Config:
    DEBUG = os.getenv("DEBUG", str(DEBUG)).lower() == "true"
    VERBOSE = os.getenv("VERBOSE", str(VERBOSE)).lower() == "true"

    LOG_PATH = os.getenv("LOG_PATH", LOG_PATH)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else LOG_LEVEL)
    LOG_ROTATION = os.getenv("LOG_ROTATION", LOG_ROTATION)
    LOG_RETENTION = os.getenv("LOG_RETENTION", LOG_RETENTION)

    # qBittorrent Web UI
    QBT_URL = os.getenv("QBT_URL", QBT_URL).rstrip('/')
    QBT_API_PATH = os.getenv("QBT_API_PATH", QBT_API_PATH)
    QBT_USERNAME = os.getenv("QBT_USERNAME", QBT_USERNAME)
    QBT_PASSWORD = os.getenv("QBT_PASSWORD", QBT_PASSWORD)
    QBT_TIMEOUT = float(os.getenv("QBT_TIMEOUT", QBT_TIMEOUT))

    @property
    def API_BASE_URL(self):
        """Construct the full Web API base URL."""
        return f"{self.QBT_URL}/{self.QBT_API_PATH.strip('/')}"


class TestConfig:
    QBT_URL = "http://qbittorrent.test:8080"
    QBT_USERNAME = "tester"
    QBT_PASSWORD = "secret"
