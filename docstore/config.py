import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


class Config:
    BASE_DIR = Path(__file__).resolve().parent.parent
    DATA_DIR = Path(os.getenv("DOCSTORE_DATA_DIR", BASE_DIR / "data"))
    HOST = os.getenv("DOCSTORE_HOST", "0.0.0.0")
    PORT = int(os.getenv("DOCSTORE_PORT", "8080"))
    LOG_LEVEL = os.getenv("DOCSTORE_LOG_LEVEL", "INFO").upper()
    JSON_SORT_KEYS = False


class DevConfig(Config):
    DEBUG = True


class ProdConfig(Config):
    DEBUG = False
