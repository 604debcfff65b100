import logging
import re

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

custom_theme = Theme(
    {
        "info": "dim cyan",
        "warning": "magenta",
        "error": "bold red",
        "node": "bold blue",
        "request": "bold green",
    }
)

console = Console(theme=custom_theme)


class CompactFilter(logging.Filter):
    """Shortens UUIDs and masks API keys so log lines stay short and safe to share."""

    # Regex for UUID (standard 8-4-4-4-12 format)
    UUID_PATTERN = re.compile(
        r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.I
    )
    # X-API-Key: abc123..., apiKey=abc123...
    API_KEY_PATTERN = re.compile(r"((?:x-api-key|apikey|api_key)['\"]?\s*[:=]\s*['\"]?)([^\s'\",}]+)", re.I)

    def filter(self, record):
        if not isinstance(record.msg, str):
            return True

        msg = record.msg
        msg = msg.replace("onetap.workflows.engine.", "engine.")

        def shorten_uuid(match):
            val = match.group(0)
            return f"{val[:4]}.."

        def mask_key(match):
            secret = match.group(2)
            return f"{match.group(1)}{secret[:3]}***"

        msg = self.API_KEY_PATTERN.sub(mask_key, msg)
        msg = self.UUID_PATTERN.sub(shorten_uuid, msg)

        record.msg = msg
        return True


def setup_global_logger(log_level: str = "INFO"):
    """
    Configures the package logger using Rich for readable output.
    """
    logger = logging.getLogger("onetap")

    level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(level)

    # Avoid duplicate handlers
    if not logger.handlers:
        rich_handler = RichHandler(
            console=console,
            rich_tracebacks=True,
            markup=False,
            show_path=False,
            show_time=True,
            omit_repeated_times=True,
            keywords=[
                "node",
                "poll",
                "webhook",
                "GET",
                "POST",
                "PUT",
                "DELETE",
            ],
        )

        formatter = logging.Formatter("%(message)s", datefmt="[%X]")
        rich_handler.setFormatter(formatter)
        rich_handler.addFilter(CompactFilter())
        logger.addHandler(rich_handler)

    return logger


logger = logging.getLogger("onetap")
