"""Run the API with uvicorn: ``python -m driveclone``."""
import logging

import uvicorn

from driveclone.config import settings


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("driveclone.main:app", host="0.0.0.0", port=settings.API_PORT)


if __name__ == "__main__":
    main()
