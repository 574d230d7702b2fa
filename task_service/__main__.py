# task_service/__main__.py
"""Run the task service with uvicorn: ``python -m task_service``."""

import logging

import uvicorn

from task_service import config


def main() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("API listening on %s", config.PORT)
    uvicorn.run("task_service.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()
