import logging

_LOGGER_NAME = "mandelview"

def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)
