"""Main entry point for the dialogkit demo bot."""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from demo import register_demo
from dialogkit import Application, BotConfig
from dialogkit.api import create_fastapi_app
from dialogkit.logging_config import setup_logging


def main():
    """Run the bot."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    # Get configuration from environment
    api_host = os.getenv("API_HOST", "localhost")
    api_port = int(os.getenv("API_PORT", "8000"))

    application = Application(BotConfig.from_env())
    register_demo(application)

    app = create_fastapi_app(application)

    # Run with uvicorn
    uvicorn.run(
        app,
        host=api_host,
        port=api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
