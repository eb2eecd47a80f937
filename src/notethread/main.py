"""Application entry point for NoteThread backend server."""

from notethread.app import App
from notethread.config import Config
from notethread.logging import setup_logging
from notethread.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
