import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# Base directory
BASE_DIR = Path(__file__).parent.parent
PACKAGE_DIR = Path(__file__).parent


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    # --- Application Settings ---
    APP_TITLE = os.getenv("APP_TITLE", "Générateur de rapport")
    APP_ICON = os.getenv("APP_ICON", "📋")
    APP_LAYOUT = os.getenv("APP_LAYOUT", "wide")

    # --- Assets ---
    ASSETS_DIR = Path(os.getenv("ASSETS_DIR", str(PACKAGE_DIR / "assets")))
    LOGO_PATH = Path(os.getenv("LOGO_PATH", str(ASSETS_DIR / "logo.png")))
    WATERMARK_PATH = Path(os.getenv("WATERMARK_PATH", str(ASSETS_DIR / "watermark.png")))
    MAX_IMAGE_BYTES = int(os.getenv("MAX_IMAGE_BYTES", str(8 * 1024 * 1024)))

    # --- PDF Layout ---
    WATERMARK_OPACITY = float(os.getenv("WATERMARK_OPACITY", "0.06"))
    MIN_BLOCK_RESERVATION_MM = float(os.getenv("MIN_BLOCK_RESERVATION_MM", "28"))
    REPEAT_TABLE_HEADER = _env_bool("REPEAT_TABLE_HEADER", "true")

    # --- Output ---
    OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", str(BASE_DIR / "reports")))
