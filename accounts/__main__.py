"""Run the service with uvicorn: python -m accounts."""

import uvicorn

from accounts.core.config import get_settings
from accounts.main import create_app


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=8080,
        log_config=None,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
