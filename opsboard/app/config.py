import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()

APP_DIR = os.path.dirname(__file__)
ROOT_DIR = os.path.abspath(os.path.join(APP_DIR, ".."))
DEFAULT_TOPOLOGY_PATH = os.path.join(ROOT_DIR, "res", "topology.yaml")


def _origins() -> List[str]:
    raw = os.getenv("OB_ALLOWED_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass(frozen=True)
class Settings:
    EVENT_INTERVAL_S: float = float(os.getenv("OB_EVENT_INTERVAL_S", "2"))
    TOPOLOGY_PATH: str = os.getenv("OB_TOPOLOGY_PATH", DEFAULT_TOPOLOGY_PATH)
    ALLOWED_ORIGINS: List[str] = field(default_factory=_origins)
    BLACKBOX_APPROVAL_DELAY_S: float = float(os.getenv("OB_BLACKBOX_APPROVAL_DELAY_S", "2"))
    LOG_LEVEL: str = os.getenv("OB_LOG_LEVEL", "INFO")
    HOST: str = os.getenv("OB_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("OB_PORT", "3000"))
    BASE_URL: str = os.getenv("OB_BASE_URL", "http://127.0.0.1:3000")

settings = Settings()
