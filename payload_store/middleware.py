# middleware.py
import copy
import os
from typing import Any, Callable, Optional, Sequence, TypeVar

from aws_lambda_powertools import Logger
from aws_lambda_powertools.middleware_factory import lambda_handler_decorator

from .core.config import OffloadConfig
from .core.logger import create_logger
from .engine import PayloadOffloadEngine
from .stores import create_store

R = TypeVar("R")


# ──────────────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────────────
def default_stores_from_env() -> list:
    """
    Build the default store list: one S3 store on EXTERNAL_PAYLOAD_BUCKET.
    """
    bucket = os.getenv("EXTERNAL_PAYLOAD_BUCKET")
    if not bucket:
        raise ValueError("EXTERNAL_PAYLOAD_BUCKET env var (or explicit stores) required")
    return [create_store("s3", bucket=bucket)]


# ──────────────────────────────────────────────────────────────────────────────
# Middleware
# ──────────────────────────────────────────────────────────────────────────────
class PayloadStoreMiddleware:
    """
    Wraps a Lambda handler so that
        * references in the incoming event are replaced by their payloads
          before the handler runs, and
        * output above ``min_size`` is offloaded to a store and replaced by a
          reference before it is returned to Step Functions.
    """

    # --------------------------------------------------------------------- init
    def __init__(
        self,
        stores: Optional[Sequence[Any]] = None,
        load_options: Any = True,
        store_options: Any = True,
        logger: Optional[Logger] = None,
    ):
        self.service = os.getenv("SERVICE", "undefined_service")
        self.logger = logger or create_logger(
            service=self.service, level=os.getenv("LOG_LEVEL", "INFO")
        )

        if stores is None:
            stores = default_stores_from_env()

        self.config = OffloadConfig(
            stores=stores,
            load_options=load_options,
            store_options=store_options,
            logger=self.logger,
        )
        self.engine = PayloadOffloadEngine.from_config(self.config)

    # ----------------------------------------------------------------- caller
    def __call__(self, handler: Callable[..., R]) -> Callable[..., R]:
        @lambda_handler_decorator
        def wrap(inner, event, ctx):
            event = self.engine.before(copy.deepcopy(event))
            result = inner(event, ctx)
            return self.engine.after(result)

        return wrap(handler)


# ──────────────────────────────────────────────────────────────────────────────
# Factory helpers
# ──────────────────────────────────────────────────────────────────────────────
def payload_store_middleware(**kw):
    """Resolve references in the input and offload large output."""
    mw = PayloadStoreMiddleware(**kw)
    return lambda handler: mw(handler)


def load_input(**kw):
    """Only resolve references in the input."""
    kw["store_options"] = False
    return payload_store_middleware(**kw)


def store_output(**kw):
    """Only offload large output."""
    kw["load_options"] = False
    return payload_store_middleware(**kw)
