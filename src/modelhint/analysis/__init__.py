"""Method-based analysis of model classes.

1. **Relation detection** (:mod:`~modelhint.analysis.relations`) -- a pure
   text search for relation factory calls inside a method body.
2. **Pattern analysis** (:mod:`~modelhint.analysis.methods`) -- classifies
   every public method as an accessor, mutator, query scope or relation and
   registers the result on the model's schema.
"""

from __future__ import annotations

from modelhint.analysis.methods import MethodPatternAnalyzer
from modelhint.analysis.relations import RELATION_KINDS, detect_relations

__all__ = ["MethodPatternAnalyzer", "RELATION_KINDS", "detect_relations"]
