"""Application entry point for the Boxing Coach backend server."""

from boxingcoach.app import App
from boxingcoach.config import Config
from boxingcoach.logging import setup_logging
from boxingcoach.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
