from pathlib import Path
# Use BaseSettings for environment variable loading
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
import os
import logging # For ensure_configured_dirs

logger = logging.getLogger(__name__)

# Define a base directory using environment variable or default
# This allows flexibility in deployment (e.g., in containers)
PROJECT_ROOT_ENV = os.getenv("PROJECT_ROOT")
BASE_DIR = Path(PROJECT_ROOT_ENV).resolve() if PROJECT_ROOT_ENV else Path(__file__).resolve().parent.parent.parent

DEFAULT_USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:133.0) Gecko/20100101 Firefox/133.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:133.0) Gecko/20100101 Firefox/133.0",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36 Edg/130.0.0.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/18.1 Safari/605.1.15",
]

class Settings(BaseSettings):
    """Application Configuration using Pydantic BaseSettings."""
    # Load from .env file first, then environment variables. Ignore extras.
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    # --- Base Paths ---
    # Screenshots and HTML dumps from failed scrapes land here (fixed names, overwritten)
    DEBUG_DIR: Path = BASE_DIR
    ERROR_SCREENSHOT_NAME: str = "error_screenshot.png"
    ERROR_HTML_NAME: str = "error_page.html"

    # --- Upstream Search Page ---
    SEARCH_BASE_URL: str = "https://yandex.com/images/search"
    RESULT_ITEM_SELECTOR: str = ".SerpItem"
    RESULT_WAIT_TIMEOUT_MS: int = 10000
    CAPTCHA_URL_MARKER: str = "showcaptcha"

    # --- Retry / Pacing ---
    MAX_CAPTCHA_RETRIES: int = 3
    CAPTCHA_RETRY_DELAY: float = 0.0   # Seconds between CAPTCHA attempts
    SCROLL_DELAY_MIN: float = 1.0      # Seconds, lower bound of the inter-scroll pause
    SCROLL_DELAY_MAX: float = 3.0
    RANDOM_SEED: Optional[int] = None  # Seed delay/user-agent strategies (tests, reproducible runs)

    # --- Browser ---
    BROWSER_HEADLESS: bool = True
    BROWSER_ARGS: List[str] = [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-blink-features=AutomationControlled",
    ]
    ENABLE_STEALTH: bool = True
    VIEWPORT_WIDTH: int = 1366
    VIEWPORT_HEIGHT: int = 768
    USER_AGENTS: List[str] = DEFAULT_USER_AGENTS

    # --- API Configuration ---
    API_HOST: str = "0.0.0.0"
    # Older deployments only set PORT, keep honouring it
    API_PORT: int = Field(default=5000, validation_alias=AliasChoices("API_PORT", "PORT"))
    # ALLOWED_HOSTS should be set restrictively in production via env var
    # Example: ALLOWED_HOSTS='["https://yourdomain.com", "https://www.yourdomain.com"]'
    ALLOWED_HOSTS: List[str] = ["*"] # Default allows all, CHANGE FOR PROD
    SHUTDOWN_TIMEOUT: int = 10         # Seconds to drain in-flight requests on SIGTERM/SIGINT

    # --- API Query Defaults ---
    DEFAULT_START: int = 0
    DEFAULT_COUNT: int = 30
    MAX_COUNT: int = 300

    # Pydantic v2 way to run logic after validation/loading
    def __init__(self, **values):
        super().__init__(**values)
        if self.SCROLL_DELAY_MAX < self.SCROLL_DELAY_MIN:
            raise ValueError("SCROLL_DELAY_MAX must be >= SCROLL_DELAY_MIN")
        if self.MAX_CAPTCHA_RETRIES < 1:
            raise ValueError("MAX_CAPTCHA_RETRIES must be at least 1")

    @property
    def error_screenshot_path(self) -> Path:
        return self.DEBUG_DIR / self.ERROR_SCREENSHOT_NAME

    @property
    def error_html_path(self) -> Path:
        return self.DEBUG_DIR / self.ERROR_HTML_NAME

# Instantiate settings - This single instance will be imported elsewhere
settings = Settings()

# Utility function to ensure directories exist (call this on app startup)
def ensure_configured_dirs():
    dirs_to_ensure = [
        settings.DEBUG_DIR,
    ]
    logger.info("Ensuring configured directories exist...")
    for dir_path in dirs_to_ensure:
        try:
            dir_path.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Directory ensured: {dir_path}")
        except Exception as e:
            logger.error(f"Failed to create directory {dir_path}: {e}", exc_info=True)
            raise RuntimeError(f"Could not create critical directory: {dir_path}") from e
