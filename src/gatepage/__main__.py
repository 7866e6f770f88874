"""gatepage entrypoint.

Run with:
  python -m gatepage
"""

import uvicorn
from dotenv import load_dotenv

from gatepage.config import Settings
from gatepage.log import logger, setup_logging


def main() -> None:
    load_dotenv()
    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_file)
    logger.info(f"Starting on {settings.host}:{settings.port} (database: {settings.database_url})")
    uvicorn.run(
        "gatepage.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
