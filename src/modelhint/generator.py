"""Run the full annotation pipeline over the models of a project.

:class:`ModelHintGenerator` ties the components together. For every selected
model it:

1. loads the class and checks that it derives from the configured model base,
2. instantiates it,
3. documents the table columns (when a database is configured),
4. classifies the model's methods,
5. merges the result into the class docstring, and
6. hands the block to the in-place writer (``write=True``) and always to the
   aggregate writer, whose rendering ends up in :attr:`RunReport.content`.

A failure while one model is processed is reported and the run moves on to
the next model. Only problems that affect the whole run (model directories
that cannot be listed, an unresolvable model base class) are raised.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from modelhint import output
from modelhint.analysis.methods import MethodPatternAnalyzer
from modelhint.annotation.synthesizer import synthesize
from modelhint.annotation.writer import AggregateWriter, InPlaceWriter
from modelhint.discovery.scanner import ModelScanner, namespaced_model_names
from modelhint.exceptions import AnalysisError, DiscoveryError
from modelhint.introspection.base import ClassIntrospector
from modelhint.introspection.runtime import RuntimeIntrospector
from modelhint.models import HintConfig, RunReport
from modelhint.registry import ModelSchema
from modelhint.schema.extractor import SchemaExtractor

logger = logging.getLogger(__name__)


class ModelHintGenerator:
    """Drive discovery, analysis, synthesis and writing for one run.

    Args:
        config: Effective configuration.
        introspector: Class reflection backend. Defaults to a
            :class:`~modelhint.introspection.runtime.RuntimeIntrospector`
            that can import modules from ``config.base_path``.
        extractor: Schema extractor, or ``None`` when no database is
            available. Table columns are then left undocumented.
        write: Rewrite the docstrings in the model source files.
        reset: Discard existing docstrings instead of extending them.
    """

    def __init__(
        self,
        config: HintConfig,
        introspector: Optional[ClassIntrospector] = None,
        extractor: Optional[SchemaExtractor] = None,
        write: bool = False,
        reset: bool = False,
    ) -> None:
        self.config = config
        self.introspector = introspector or RuntimeIntrospector((config.base_path,))
        self.extractor = extractor
        self.reset = reset
        self.in_place = InPlaceWriter() if write else None
        self.aggregate = AggregateWriter()
        self.scanner = ModelScanner(config.base_path)

    def discover(self) -> list[str]:
        """Fully qualified names of all candidate classes, in discovery order."""
        return self.scanner.scan(self.config.model_locations)

    def load_model_base(self) -> type:
        try:
            return self.introspector.load(self.config.orm.model_base)
        except AnalysisError as exc:
            raise DiscoveryError(
                f"Cannot load model base class {self.config.orm.model_base}: {exc}"
            ) from exc

    def generate(
        self,
        model_names: Optional[Iterable[str]] = None,
        ignore: Optional[Iterable[str]] = None,
    ) -> RunReport:
        """Annotate the selected models.

        Args:
            model_names: Names selecting models by qualified-name suffix
                (``User``, ``models.user.User``). All candidates when empty.
            ignore: Names of models to skip, matched the same way. Defaults
                to the configured ignore list.

        Returns:
            A :class:`~modelhint.models.RunReport` with the processed,
                ignored and failed model names and the hints file content.

        Raises:
            DiscoveryError: If the model directories cannot be listed or the
                model base class cannot be loaded.
        """
        all_models = self.discover()
        base = self.load_model_base()
        base_methods = self.introspector.list_methods(base)
        analyzer = MethodPatternAnalyzer(self.introspector, self.config.orm, base_methods)

        names = list(model_names or [])
        models = namespaced_model_names(all_models, names) if names else all_models
        ignored = namespaced_model_names(
            all_models, self.config.ignore if ignore is None else ignore
        )

        report = RunReport(schema_available=self.extractor is not None)
        for name in models:
            if name in ignored:
                output.debug(f"Ignoring model '{name}'")
                report.ignored.append(name)
                continue

            try:
                cls = self.introspector.load(name)
            except AnalysisError as exc:
                output.warning(f"Cannot load {name}: {exc}")
                report.failed.append(name)
                continue

            if not self.introspector.is_subtype_of(cls, base):
                logger.debug("%s is not a model, skipping", name)
                continue

            output.debug(f"Loading model '{name}'")
            try:
                self._annotate(cls, name, analyzer)
            except Exception as exc:
                output.error(f"Exception: {exc}\nCould not analyze class {name}.")
                report.failed.append(name)
                continue

            ignored.append(name)
            report.processed.append(name)

        if self.extractor is None:
            output.warning(
                "Database schema is unavailable, table columns were not documented. "
                "Set database.url in the config or MODELHINT_DATABASE_URL to enable it."
            )

        report.content = self.aggregate.render()
        return report

    def _annotate(self, cls: type, name: str, analyzer: MethodPatternAnalyzer) -> None:
        if not self.introspector.is_instantiable(cls):
            raise AnalysisError(f"{name} is not instantiable.")
        instance = self.introspector.instantiate(cls)

        schema = ModelSchema()
        if self.extractor is not None:
            self.extractor.extract_from_table(instance, schema)
        analyzer.analyze(cls, instance, schema)

        descriptor = self.introspector.describe(cls)
        block = synthesize(descriptor, schema, reset=self.reset)

        if self.in_place is not None:
            if self.in_place.write(descriptor, block):
                output.info(f"Written new docstring to {descriptor.source_file}")
            else:
                output.debug(f"Docstring of {name} is up to date")
        self.aggregate.write(descriptor, block)
