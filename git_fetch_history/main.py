import asyncio
import logging
from typing import Optional

from .config.settings import get_settings
from .dependencies import get_supervisor
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

EXIT_CONFIG_ERROR = 2


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("git").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)


def main(max_cycles: Optional[int] = None) -> int:
    """Run the service and return the process exit code."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        configure_logging()
        logger.error("%s", e)
        return EXIT_CONFIG_ERROR

    configure_logging(settings.LOG_LEVEL)
    logger.info("REPO %s BRANCH %s", settings.REPO, settings.BRANCH)
    return asyncio.run(get_supervisor(settings).run(max_cycles))
