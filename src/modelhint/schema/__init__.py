"""Table-derived documentation: column reflection and type naming."""

from modelhint.schema.extractor import SchemaExtractor
from modelhint.schema.types import TypeRegistry, doc_type

__all__ = ["SchemaExtractor", "TypeRegistry", "doc_type"]
