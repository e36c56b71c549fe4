"""Input ingestion: line splitting, directive handling, instruction collection."""

from yuml2svg.ingest.directives import DirectiveMatch, LineCollector, apply_directive, parse_directive
from yuml2svg.ingest.source import feed_buffer, feed_stream, is_stream

__all__ = [
    "DirectiveMatch",
    "LineCollector",
    "apply_directive",
    "feed_buffer",
    "feed_stream",
    "is_stream",
    "parse_directive",
]
