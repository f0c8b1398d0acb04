"""Logger construction shared by the engine, stores and the Lambda host."""

from typing import Optional

from aws_lambda_powertools import Logger

DEFAULT_SERVICE = "payload-store"
DEFAULT_LEVEL = "WARNING"


def create_logger(service: Optional[str] = None, level: Optional[str] = None) -> Logger:
    """
    Build a powertools Logger for the payload store.

    Components that are not handed a logger build their own through this
    helper; the default level keeps them quiet apart from warnings.
    """
    return Logger(service=service or DEFAULT_SERVICE, level=level or DEFAULT_LEVEL)
