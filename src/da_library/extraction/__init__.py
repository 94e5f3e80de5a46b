"""Block markup extraction, documentation templates and source analysis."""

from da_library.extraction.analyzer import BlockAnalysis, analyze_block, analyze_sources
from da_library.extraction.extractor import extract_block_content, parse_block_instances
from da_library.extraction.template import generate_auto_description, generate_block_template

__all__ = [
    "BlockAnalysis",
    "analyze_block",
    "analyze_sources",
    "extract_block_content",
    "generate_auto_description",
    "generate_block_template",
    "parse_block_instances",
]
