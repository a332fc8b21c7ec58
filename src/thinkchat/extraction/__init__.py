from .extractor import (
    EXTRACTION_FAILED,
    EXTRACTION_SUCCEEDED,
    ExtractionResult,
    build_extraction_messages,
    extract_record,
    finalize_extraction,
    locate_json_block,
    parse_record,
)
from .models import Address, ExtractedRecord

__all__ = [
    "EXTRACTION_FAILED",
    "EXTRACTION_SUCCEEDED",
    "Address",
    "ExtractedRecord",
    "ExtractionResult",
    "build_extraction_messages",
    "extract_record",
    "finalize_extraction",
    "locate_json_block",
    "parse_record",
]
