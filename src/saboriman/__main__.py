"""Run the server: python -m saboriman"""

import uvicorn

from saboriman.api import create_app
from saboriman.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.api.host,
        port=settings.api.port,
        log_config=None,  # configure_logging() owns the handlers
    )


if __name__ == "__main__":
    main()
