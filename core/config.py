"""
Configuration management for the markdown formatter.

All settings come from environment variables with sensible defaults, read
once into a ``FormatterConfig`` instance. Use ``get_config()`` for the shared
instance and ``reload_config()`` after changing the environment (tests).
"""

import os

# Application metadata
FORMATTER_APP_NAME = "GWS Markdown Formatter"
FORMATTER_STATE_DIR_DEFAULT = "~/.config/gws-markdown-formatter"

# Google Apps Script kills a run at 6 minutes; stay comfortably under it.
DEFAULT_TIME_BUDGET_SECONDS = 270.0
DEFAULT_RESUME_DELAY_SECONDS = 10.0
# Google Docs accepts a few hundred requests per batchUpdate call.
DEFAULT_BATCH_CHUNK_SIZE = 450

DEFAULT_FONT_FAMILY = "Arial"
CODE_FONT_FAMILY = "Consolas"
CODE_BACKGROUND_COLOR = "#f3f3f3"


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < 1:
        raise ValueError(f"{name} must be a positive integer, got {raw!r}")
    return value


class FormatterConfig:
    """
    Centralized formatter configuration.

    Single source of truth for execution limits, styling defaults and the
    OAuth client wiring used to reach Google Docs.
    """

    def __init__(self):
        # Execution controller
        self.time_budget_seconds = _get_float("FORMATTER_TIME_BUDGET_SECONDS", DEFAULT_TIME_BUDGET_SECONDS)
        self.resume_delay_seconds = _get_float("FORMATTER_RESUME_DELAY_SECONDS", DEFAULT_RESUME_DELAY_SECONDS)

        # Remote batch submission
        self.batch_chunk_size = _get_int("FORMATTER_BATCH_CHUNK_SIZE", DEFAULT_BATCH_CHUNK_SIZE)

        # Styling
        self.default_font_family = os.getenv("FORMATTER_DEFAULT_FONT", DEFAULT_FONT_FAMILY)
        self.code_font_family = os.getenv("FORMATTER_CODE_FONT", CODE_FONT_FAMILY)
        self.code_background_color = os.getenv("FORMATTER_CODE_BACKGROUND", CODE_BACKGROUND_COLOR)

        # Persisted state (checkpoints)
        self.state_dir = os.path.expanduser(os.getenv("FORMATTER_STATE_DIR", FORMATTER_STATE_DIR_DEFAULT))

        # OAuth client configuration
        self.client_id = os.getenv("GOOGLE_OAUTH_CLIENT_ID") or None
        self.client_secret = os.getenv("GOOGLE_OAUTH_CLIENT_SECRET") or None
        self.token_file = os.path.expanduser(
            os.getenv("GOOGLE_OAUTH_TOKEN_FILE", os.path.join(self.state_dir, "google_tokens.json"))
        )

        # Recipient of completion mail for continuation runs
        self.user_email = os.getenv("USER_GOOGLE_EMAIL") or None

    def is_oauth_configured(self) -> bool:
        """
        Check if OAuth client credentials are available.

        Returns:
            True if both client id and secret are set
        """
        return bool(self.client_id and self.client_secret)

    def get_checkpoint_path(self) -> str:
        """Path of the JSON file holding per-task checkpoints."""
        return os.path.join(self.state_dir, "checkpoints.json")


# Global configuration instance
_config: FormatterConfig | None = None


def get_config() -> FormatterConfig:
    """
    Get the global formatter configuration instance.

    Returns:
        The global FormatterConfig instance
    """
    global _config
    if _config is None:
        _config = FormatterConfig()
    return _config


def reload_config() -> FormatterConfig:
    """
    Reload the configuration from environment variables.

    Returns:
        The reloaded FormatterConfig instance
    """
    global _config
    _config = FormatterConfig()
    return _config
