"""
Configuration models for the payload store middleware.

Options arrive as booleans, dicts or model instances; the validators below
turn all of them into fully-defaulted models once, at setup time, so the
engine never has to guess what shape an option has.
"""

import math
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..stores import create_store
from ..utils.paths import parse_path
from ..utils.size_utils import STATE_MACHINE_PAYLOAD_LIMIT
from .errors import InvalidPathError, StoreConfigurationError

ALWAYS = "always"
NEVER = "never"

_STORE_METHODS = ("can_load", "load", "can_store", "store")


def _coerce_options(value: Any) -> Any:
    # True/None -> all defaults, False -> phase disabled
    if value is True or value is None:
        return {}
    if value is False:
        return {"skip": True}
    return value


class LoadOptions(BaseModel):
    """Options for resolving references in the function input."""

    model_config = ConfigDict(extra="forbid")

    skip: bool = False
    pass_through: bool = False
    delete_after_load: bool = False


class StoreOptions(BaseModel):
    """Options for offloading the function output."""

    model_config = ConfigDict(extra="forbid")

    skip: bool = False
    pass_through: bool = False
    selector: Union[str, List[Union[str, int]]] = ""
    min_size: Union[int, float] = STATE_MACHINE_PAYLOAD_LIMIT

    @field_validator("selector", mode="before")
    @classmethod
    def validate_selector(cls, v):
        if v is None:
            return ""
        try:
            parse_path(v)
        except InvalidPathError as exc:
            raise ValueError(str(exc)) from exc
        return v

    @field_validator("min_size", mode="before")
    @classmethod
    def coerce_min_size(cls, v):
        if isinstance(v, bool) or v is None:
            raise ValueError("min_size must be a non-negative number, 'always' or 'never'")
        if isinstance(v, str):
            lowered = v.strip().lower()
            if lowered == ALWAYS:
                return 0
            if lowered == NEVER:
                return math.inf
            raise ValueError(f"min_size must be 'always' or 'never' when given as text, got '{v}'")
        if v < 0:
            raise ValueError(f"min_size must be non-negative, got {v}")
        return v


class OffloadConfig(BaseModel):
    """Complete engine configuration.

    Attributes:
        stores: Ordered stores; the first capable store wins. Entries may be
            store objects or ``{"type": "<store type>", **options}`` dicts.
        load_options: ``True``/``False``, a dict, or LoadOptions
        store_options: ``True``/``False``, a dict, or StoreOptions
        logger: powertools Logger (optional)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    stores: List[Any] = Field(default_factory=list)
    load_options: LoadOptions = Field(default_factory=LoadOptions)
    store_options: StoreOptions = Field(default_factory=StoreOptions)
    logger: Optional[Any] = None

    @field_validator("stores", mode="before")
    @classmethod
    def build_stores(cls, v):
        if v is None:
            return []

        stores = []
        for item in v:
            if isinstance(item, dict):
                options = dict(item)
                store_type = options.pop("type", None)
                if not store_type:
                    raise ValueError("Store definitions require a 'type'")
                try:
                    item = create_store(store_type, **options)
                except StoreConfigurationError as exc:
                    raise ValueError(str(exc)) from exc

            missing = [name for name in _STORE_METHODS if not callable(getattr(item, name, None))]
            if missing:
                raise ValueError(
                    f"{type(item).__name__} is not a store, missing: {', '.join(missing)}"
                )
            stores.append(item)
        return stores

    @field_validator("load_options", "store_options", mode="before")
    @classmethod
    def fill_option_defaults(cls, v):
        return _coerce_options(v)
