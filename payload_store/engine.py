# engine.py
from typing import Any, List, Optional, Sequence

from aws_lambda_powertools import Logger

from .core.config import LoadOptions, OffloadConfig, StoreOptions
from .core.errors import NoStoreFoundError, SelectorNotFoundError
from .core.logger import create_logger
from .core.models import LoadArgs, StoreArgs
from .utils.paths import (
    MISSING,
    Path,
    expand_path,
    format_path,
    get_value,
    has_wildcard,
    parse_path,
    set_value,
    wildcard_base,
)
from .utils.references import create_reference, find_all_references
from .utils.size_utils import calculate_byte_size


def _is_empty_container(value: Any) -> bool:
    return isinstance(value, (dict, list)) and len(value) == 0


def _store_name(store: Any) -> str:
    return getattr(store, "name", None) or type(store).__name__


# ──────────────────────────────────────────────────────────────────────────────
# Engine
# ──────────────────────────────────────────────────────────────────────────────
class PayloadOffloadEngine:
    """
    Resolves references in function input (``before``) and offloads oversized
    function output to a store (``after``).

    Each phase walks its paths one at a time in a fixed order and mutates the
    payload tree in place; a later path always sees the rewrites of the
    earlier ones. There is no rollback: if a path fails, rewrites already made
    in the same phase stay.

    The engine holds no per-invocation state and can serve concurrent
    invocations as long as its stores can.
    """

    # --------------------------------------------------------------------- init
    def __init__(
        self,
        stores: Sequence[Any],
        load_options: Optional[LoadOptions] = None,
        store_options: Optional[StoreOptions] = None,
        logger: Optional[Logger] = None,
    ):
        self.stores = tuple(stores)
        self.load_options = load_options or LoadOptions()
        self.store_options = store_options or StoreOptions()
        self.logger = logger or create_logger()
        self.selector: Path = parse_path(self.store_options.selector)

    @classmethod
    def from_config(cls, config: OffloadConfig) -> "PayloadOffloadEngine":
        return cls(
            stores=config.stores,
            load_options=config.load_options,
            store_options=config.store_options,
            logger=config.logger,
        )

    # ---------------------------------------------------------- private helpers
    def _find_loader(self, args: LoadArgs) -> Optional[Any]:
        for store in self.stores:
            if store.can_load(args):
                return store
        return None

    def _find_writer(self, args: StoreArgs) -> Optional[Any]:
        for store in self.stores:
            if store.can_store(args):
                return store
        return None

    def _delete_after_load(self, store: Any, args: LoadArgs, path: str) -> None:
        can_delete = getattr(store, "can_delete", None)
        delete = getattr(store, "delete", None)
        if not callable(can_delete) or not callable(delete):
            return
        try:
            if can_delete(args):
                delete(args)
                self.logger.debug(
                    "Deleted payload after load",
                    extra={"store": _store_name(store), "path": path},
                )
        except Exception as exc:  # noqa: BLE001
            self.logger.warning(
                f"Failed to delete payload after load: {exc}",
                extra={"store": _store_name(store), "path": path},
            )

    def _select_paths(self, output: Any) -> List[Path]:
        """
        Expand the selector against ``output``; every returned path exists.

        Raises:
            SelectorNotFoundError: If the selector, its wildcard base, or the
                tail after a wildcard is absent for any matched element
        """
        selector_text = format_path(self.selector)
        if has_wildcard(self.selector):
            if get_value(output, wildcard_base(self.selector)) is MISSING:
                raise SelectorNotFoundError(selector_text)
            paths = expand_path(output, self.selector)
        else:
            paths = [self.selector]

        for path in paths:
            if get_value(output, path) is MISSING:
                raise SelectorNotFoundError(selector_text, f"no value at '{format_path(path)}'")
        return paths

    # ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
    # Phase A: resolve references in the input
    # ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
    def before(self, event: Any) -> Any:
        """
        Replace every reference in ``event`` with the payload it points to.

        Returns the rewritten event, which is the same object unless the
        event itself was a reference.

        Raises:
            NoStoreFoundError: If no store can load a reference and
                pass-through is disabled
        """
        if self.load_options.skip:
            self.logger.debug("Loading is disabled, skipping input")
            return event

        if not isinstance(event, (dict, list)) or _is_empty_container(event):
            self.logger.debug(
                "Input is not a non-empty object or array, skipping load",
                extra={"input_type": type(event).__name__},
            )
            return event

        references = find_all_references(event)
        if not references:
            self.logger.debug("No references found in input")
            return event

        self.logger.info(
            f"Found {len(references)} references in input",
            extra={"paths": [ref.path_string for ref in references]},
        )

        for ref in references:
            path = ref.path_string
            args = LoadArgs(reference=ref.token)

            store = self._find_loader(args)
            if store is None:
                if self.load_options.pass_through:
                    self.logger.info(
                        "No store can load reference, passing token through",
                        extra={"path": path},
                    )
                    event = set_value(event, ref.path, ref.token)
                    continue
                raise NoStoreFoundError("load", path, f"reference: {ref.token!r}")

            self.logger.debug(
                "Loading reference", extra={"store": _store_name(store), "path": path}
            )
            payload = store.load(args)
            event = set_value(event, ref.path, payload)

            if self.load_options.delete_after_load:
                self._delete_after_load(store, args, path)

        return event

    # ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
    # Phase B: offload the output
    # ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
    def after(self, output: Any) -> Any:
        """
        Offload the selected part(s) of ``output`` when it is large enough.

        Only non-empty dicts, lists and strings are considered; the empty
        string passes through like the empty containers, whatever
        ``min_size`` is. The selector is resolved before the size gate, so
        a selector missing from the output fails even for small output.

        Returns the rewritten output; for the root selector that is the
        reference itself.

        Raises:
            SelectorNotFoundError: If the selector does not exist in the output
            NoStoreFoundError: If no store accepts a selected payload and
                pass-through is disabled
            UnsupportedTypeError: If the output is not JSON-serializable
        """
        options = self.store_options
        if options.skip:
            self.logger.debug("Storing is disabled, skipping output")
            return output

        if not isinstance(output, (dict, list, str)) or len(output) == 0:
            self.logger.debug(
                "Output is not a non-empty object, array or string, skipping store",
                extra={"output_type": type(output).__name__},
            )
            return output

        paths = self._select_paths(output)

        byte_size = calculate_byte_size(output)
        if byte_size < options.min_size:
            self.logger.debug(
                f"Output size of {byte_size} bytes is below {options.min_size}, skipping store"
            )
            return output

        self.logger.info(
            f"Output size of {byte_size} bytes reaches {options.min_size}, storing",
            extra={"selector": format_path(self.selector)},
        )

        for path in paths:
            path_text = format_path(path)
            payload = get_value(output, path)
            args = StoreArgs(payload=payload, byte_size=calculate_byte_size(payload))

            store = self._find_writer(args)
            if store is None:
                if options.pass_through:
                    self.logger.info(
                        "No store can store payload, passing it through",
                        extra={"path": path_text, "byte_size": args.byte_size},
                    )
                    continue
                raise NoStoreFoundError("store", path_text, f"byte_size: {args.byte_size}")

            token = store.store(args)
            output = set_value(output, path, create_reference(token))
            self.logger.debug(
                "Replaced payload with reference",
                extra={"store": _store_name(store), "path": path_text, "byte_size": args.byte_size},
            )

        return output
