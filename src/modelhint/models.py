"""Canonical Pydantic models shared across all modelhint modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- serialised as JSON in the user's config directory
or in a project-local ``modelhint.json``:
    :class:`DatabaseConfig`, :class:`OrmConfig`, :class:`OutputConfig` and
    :class:`HintConfig`.

**Analysis models** -- produced while a model class is analyzed and consumed
by the annotation synthesizer:
    :class:`ModelDescriptor`, :class:`ColumnDoc`, :class:`Parameter`,
    :class:`PropertyEntry`, :class:`MethodEntry` and :class:`RunReport`.

All models use Pydantic v2.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


# --- Configuration Models ---


class DatabaseConfig(BaseModel):
    """Connection and type-mapping settings for schema reflection.

    When ``url`` is unset, table columns are not documented and a single
    warning is printed at the end of the run.

    Example::

        DatabaseConfig(
            url="postgresql+psycopg://app@localhost/app",
            custom_types={"postgresql": {"citext": "string", "jsonb": "json"}},
        )
    """

    url: Optional[str] = Field(
        default=None, description="SQLAlchemy database URL used for schema reflection"
    )
    table_prefix: str = Field(
        default="", description="Prefix prepended to every model's table name"
    )
    custom_types: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description="Per-dialect mapping of database type names to native type names "
        "(e.g. {'postgresql': {'citext': 'string'}})",
    )


class OrmConfig(BaseModel):
    """Names of the ORM classes that annotations refer to.

    The defaults follow the Orator ORM layout. Every value is a dotted path;
    only ``model_base`` is imported, the others are rendered verbatim into
    type expressions.
    """

    model_base: str = Field(
        default="orator.orm.Model",
        description="Dotted path of the base class every model derives from",
    )
    query_builder_type: str = Field(
        default="orator.orm.Builder",
        description="Type returned by query scopes and where<Column> methods",
    )
    collection_type: str = Field(
        default="orator.orm.Collection",
        description="Collection type used when a related model has no new_collection()",
    )
    datetime_type: str = Field(
        default="datetime.datetime", description="Type of columns listed as dates"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`HintConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class HintConfig(BaseModel):
    """Effective configuration for a modelhint run.

    Loaded from ``~/.config/modelhint/config.json`` and layered with the
    project-local ``modelhint.json``, environment variables and CLI flags.
    See :func:`~modelhint.config.resolve_config` for the precedence chain.
    """

    model_locations: list[str] = Field(
        default_factory=lambda: ["app"],
        description="Directories (relative to base_path) searched for model classes",
    )
    base_path: str = Field(
        default=".", description="Project root used to derive module names and imports"
    )
    filename: str = Field(
        default="_model_hints.py", description="Path of the aggregate hints file"
    )
    ignore: list[str] = Field(
        default_factory=list, description="Model names that are never analyzed"
    )
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    orm: OrmConfig = Field(default_factory=OrmConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Analysis Models ---


class ModelDescriptor(BaseModel):
    """Identity and existing docstring of one discovered model class.

    Built once per model by
    :meth:`~modelhint.introspection.base.ClassIntrospector.describe` and never
    mutated afterwards.

    ``raw_docstring`` is the exact source literal (quotes and prefixes
    included) of the existing docstring. The in-place writer replaces that
    literal verbatim, so it must match the file contents byte for byte.
    """

    name: str = Field(description="Fully qualified name, e.g. app.models.user.User")
    namespace: str = Field(description="Module the class is defined in")
    short_name: str
    qualname: str
    source_file: Optional[str] = None
    docstring: Optional[str] = Field(
        default=None, description="Cleaned docstring text, if any"
    )
    raw_docstring: Optional[str] = Field(
        default=None, description="Docstring literal as it appears in the source"
    )
    docstring_indent: int = Field(
        default=4, description="Column of the first statement in the class body"
    )


class ColumnDoc(BaseModel):
    """A single table column as documented on the model."""

    name: str
    type: str = "mixed"
    comment: str = ""


class Parameter(BaseModel):
    """A method parameter rendered inside an ``@method`` tag."""

    name: str
    has_default: bool = False
    default: Any = None

    def render(self) -> str:
        """Return ``$name`` or ``$name = <literal>`` when a default exists."""
        if not self.has_default:
            return f"${self.name}"
        return f"${self.name} = {render_default(self.default)}"


class PropertyEntry(BaseModel):
    """A dynamic property collected for one model."""

    name: str
    type: str = "mixed"
    read: bool = False
    write: bool = False
    comment: str = ""

    @property
    def tag_kind(self) -> str:
        """The annotation tag this property is declared with."""
        if self.read and self.write:
            return "property"
        if self.write:
            return "property-write"
        return "property-read"


class MethodEntry(BaseModel):
    """A dynamic (static-callable) method collected for one model."""

    name: str
    return_type: str = ""
    parameters: list[Parameter] = Field(default_factory=list)

    def render_arguments(self) -> str:
        return ", ".join(param.render() for param in self.parameters)


class RunReport(BaseModel):
    """Outcome of one :class:`~modelhint.generator.ModelHintGenerator` run."""

    processed: list[str] = Field(default_factory=list)
    ignored: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    schema_available: bool = True
    content: str = ""


def render_default(value: Any) -> str:
    """Render a parameter default as an annotation literal.

    Booleans become ``true``/``false``, containers become ``[]``, ``None``
    becomes ``null`` and anything else is quoted after stripping whitespace.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return "[]"
    if value is None:
        return "null"
    return f"'{str(value).strip()}'"
