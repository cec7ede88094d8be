"""
Run the API server. From project root:
  python -m app.scripts.serve
Binds HOST:PORT from settings (default 0.0.0.0:3000).
"""
import sys

import uvicorn

from app.core.config import get_settings


def main() -> int:
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
