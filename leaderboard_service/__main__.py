import logging

import uvicorn

from leaderboard_service.app import create_app
from leaderboard_service.config import HOST, LOG_FORMAT, LOG_LEVEL, PORT

logger = logging.getLogger("leaderboard_service")


def main():
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    app = create_app()
    logger.info("Server running at http://localhost:%s/", PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
