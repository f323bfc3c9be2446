"""Annotation blocks: parsing, merging and writing class docstrings."""

from modelhint.annotation.block import AnnotationBlock, Tag
from modelhint.annotation.synthesizer import synthesize
from modelhint.annotation.writer import AggregateWriter, InPlaceWriter

__all__ = ["AggregateWriter", "AnnotationBlock", "InPlaceWriter", "Tag", "synthesize"]
