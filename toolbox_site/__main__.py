"""Server entry point: ``python -m toolbox_site`` or the ``toolbox-site`` script."""

import structlog
import uvicorn

from toolbox_site.config import settings
from toolbox_site.main import app

logger = structlog.get_logger()


def main() -> None:
    """Run the site and transcript proxy on HOST:PORT."""
    logger.info(
        "server.start",
        url=f"http://localhost:{settings.PORT}",
        static_root=str(settings.static_root_path()),
    )
    # log_config=None keeps the structlog setup done when the app module was imported.
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
