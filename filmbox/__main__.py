"""Run the API with uvicorn: python -m filmbox"""

import uvicorn

from filmbox.core.config import settings
from filmbox.main import app


def main() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
