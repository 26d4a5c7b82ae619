"""Configuration store: plugins, variable environment and function registry."""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from lv2hostconfig.core.models import HostDocument, PluginConfig, RawPlugin
from lv2hostconfig.document import dump_document, parse_document, read_document, write_document
from lv2hostconfig.errors import CoercionError, HostConfigError
from lv2hostconfig.expression.constants import DEFAULT_REFERENCE_LEVEL, REFERENCE_VARIABLE
from lv2hostconfig.expression.evaluator import ExpressionEvaluator
from lv2hostconfig.expression.functions import FunctionRegistry, NumericFunction
from lv2hostconfig.expression.values import coerce

logger = logging.getLogger(__name__)


class ConfigurationStore:
    """Holds plugin configurations and resolves their parameters.

    Parameters are kept in two forms. formatted is the source text from the
    document and is what serialize() writes back. resolved is produced by
    evaluate() from formatted, the environment and the function registry.

    evaluate() is all-or-nothing: it builds a new plugin list and only swaps
    it in when every parameter resolved. After a failure, plugins is the
    same list object it was before the call.

    Not safe for concurrent use; callers serialize access.
    """

    def __init__(
        self,
        environment: Mapping[str, Any] | None = None,
        functions: Mapping[str, NumericFunction] | FunctionRegistry | None = None,
    ) -> None:
        """Initialize an empty store.

        Args:
            environment: Initial variables.
            functions: Custom functions, installed on top of the built-in
                library (same names replace built-ins).
        """
        self.environment: dict[str, Any] = dict(environment or {})
        self.functions = FunctionRegistry.with_builtins()
        if functions is not None:
            for name, function in functions.items():
                self.functions.register(name, function.arity, function.func)

        self._plugins: list[PluginConfig] = []
        self._evaluated = False
        self._last_evaluation: datetime | None = None
        self._source: Path | None = None

    # =========================================================================
    # Loading
    # =========================================================================

    def load(self, document: HostDocument) -> None:
        """Replace all plugins with the contents of a document.

        Copies each plugin's parameter text into formatted, leaves resolved
        empty and sets the 'reference' variable from referenceLevel. Nothing
        is evaluated.
        """
        self._plugins = [self._from_raw(raw) for raw in document.plugins]
        self._evaluated = False

        reference = document.reference_level
        self.environment[REFERENCE_VARIABLE] = reference if reference is not None else DEFAULT_REFERENCE_LEVEL

        logger.info(
            "Loaded %d plugins (%d parameters), reference=%s",
            len(self._plugins),
            self.parameters_count,
            self.environment[REFERENCE_VARIABLE],
        )

    def load_text(self, text: str) -> None:
        """Parse YAML text and load it.

        Raises:
            DocumentError: If the text cannot be parsed.
        """
        self.load(parse_document(text))

    def load_file(self, path: Path | str) -> None:
        """Read a YAML file and load it.

        Raises:
            DocumentError: If the file cannot be read or parsed.
        """
        document = read_document(path)
        self.load(document)
        self._source = Path(path)

    def parse_file(self, path: Path | str) -> None:
        """Load a YAML file and evaluate it in one step."""
        self.load_file(path)
        self.evaluate()

    @staticmethod
    def _from_raw(raw: RawPlugin) -> PluginConfig:
        return PluginConfig(plugin_uri=raw.plugin_uri, formatted=dict(raw.parameters))

    # =========================================================================
    # Evaluation
    # =========================================================================

    def evaluate(self) -> None:
        """Resolve every formatted parameter of every plugin.

        Raises:
            HostConfigError: The first failure, with plugin URI, parameter
                name and formatted text attached. The store is unchanged.
        """
        evaluator = ExpressionEvaluator(dict(self.environment), self.functions.copy())
        candidates: list[PluginConfig] = []

        for plugin in self._plugins:
            resolved: dict[str, float] = {}
            for name, text in plugin.formatted.items():
                try:
                    resolved[name] = evaluator.resolve(text)
                except HostConfigError as e:
                    e.with_context(plugin_uri=plugin.plugin_uri, parameter=name, text=text)
                    logger.warning("Evaluation failed, keeping previous values: %s", e)
                    raise
            candidates.append(
                PluginConfig(
                    plugin_uri=plugin.plugin_uri,
                    formatted=dict(plugin.formatted),
                    resolved=resolved,
                )
            )

        self._plugins = candidates
        self._evaluated = True
        self._last_evaluation = datetime.now()
        logger.info("Evaluated %d parameters across %d plugins", self.parameters_count, len(candidates))

    # =========================================================================
    # Serialization
    # =========================================================================

    def serialize(self) -> HostDocument:
        """Build a document from formatted text only.

        Resolved values are never written: changing a resolved value without
        changing its formatted text has no effect on the output.
        """
        return HostDocument(
            reference_level=self._reference_level(),
            plugins=[
                RawPlugin(plugin_uri=plugin.plugin_uri, parameters=dict(plugin.formatted))
                for plugin in self._plugins
            ],
        )

    def dump(self) -> str:
        """Serialize to YAML text."""
        return dump_document(self.serialize())

    def save_file(self, path: Path | str | None = None) -> Path:
        """Write the serialized document to a file.

        Args:
            path: Destination; defaults to the file last loaded.

        Raises:
            ValueError: If no path is given and nothing was loaded from a file.
            DocumentError: If the file cannot be written.
        """
        if path is None:
            if self._source is None:
                raise ValueError("No path given and no source file loaded")
            path = self._source
        return write_document(self.serialize(), path)

    def _reference_level(self) -> float | None:
        if REFERENCE_VARIABLE not in self.environment:
            return None
        try:
            return coerce(self.environment[REFERENCE_VARIABLE])
        except CoercionError:
            logger.warning("Variable '%s' is not numeric, omitting referenceLevel", REFERENCE_VARIABLE)
            return None

    # =========================================================================
    # Environment and Functions
    # =========================================================================

    def set_variable(self, name: str, value: Any) -> Any:
        """Set an environment variable. Returns the previous value (or None)."""
        old_value = self.environment.get(name)
        self.environment[name] = value
        return old_value

    def register_function(self, name: str, arity: int, func: Callable[..., Any]) -> NumericFunction:
        """Register a custom function, replacing any function of the same name."""
        return self.functions.register(name, arity, func)

    # =========================================================================
    # Access
    # =========================================================================

    @property
    def plugins(self) -> list[PluginConfig]:
        """Plugins in document order."""
        return self._plugins

    def plugin(self, plugin_uri: str) -> PluginConfig | None:
        """Get plugin by URI (returns first match)."""
        for plugin in self._plugins:
            if plugin.plugin_uri == plugin_uri:
                return plugin
        return None

    @property
    def evaluated(self) -> bool:
        """True after a successful evaluate() since the last load."""
        return self._evaluated

    @property
    def last_evaluation(self) -> datetime | None:
        """Get timestamp of last successful evaluation."""
        return self._last_evaluation

    @property
    def source(self) -> Path | None:
        """File the plugins were last loaded from."""
        return self._source

    @property
    def count(self) -> int:
        """Get number of plugins."""
        return len(self._plugins)

    @property
    def parameters_count(self) -> int:
        return sum(len(plugin.formatted) for plugin in self._plugins)
