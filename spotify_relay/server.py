import logging

import uvicorn

from spotify_relay.config import settings
from spotify_relay.main import app

logger = logging.getLogger(__name__)


def main():
    logger.info("Spotify Dashboard running on http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
