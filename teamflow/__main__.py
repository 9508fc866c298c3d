"""Run the API with uvicorn: ``python -m teamflow``."""

import uvicorn

from teamflow.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        "teamflow.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
