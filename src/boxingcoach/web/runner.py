"""Uvicorn runner for the Boxing Coach API."""

import structlog
import uvicorn
from uvicorn.config import LOGGING_CONFIG

from boxingcoach.app import App
from boxingcoach.config import Config
from boxingcoach.web.server import create_fastapi_app

logger = structlog.get_logger(__name__)


def run_server(app: App, config: Config) -> None:
    """Serve the API on the configured host and port until interrupted."""
    fastapi_app = create_fastapi_app(app, config)

    # Request logging is done by the app middleware; uvicorn keeps its own lifecycle messages
    log_config = LOGGING_CONFIG.copy()
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - uvicorn - %(levelname)s - %(message)s"

    logger.info("server_starting", host=config.host, port=config.port, environment=config.environment)
    uvicorn.run(fastapi_app, host=config.host, port=config.port, log_config=log_config, access_log=False)
