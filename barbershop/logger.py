import os
import logging

_handlers = [logging.StreamHandler()]
if os.environ.get("LOG_FILE"):
    _handlers.append(logging.FileHandler(os.environ["LOG_FILE"]))

logging.basicConfig(
    format="%(filename)s - %(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=_handlers,
)
if os.environ.get("ENV") == "production":
    logging.getLogger().setLevel(logging.INFO)
else:
    logging.getLogger().setLevel(logging.DEBUG)


def get_logger(filename: str) -> logging.Logger:
    return logging.getLogger(filename)
