"""recordkit - read, write, copy and diff record fields by name."""

from .accessor import (
    changed_fields,
    clear_fields,
    convert_to,
    convert_to_scalar,
    copy_all_fields,
    copy_fields,
    fields_equal,
    from_mapping,
    get_field,
    has_field,
    read_field,
    reset_fields,
    set_field,
    to_mapping,
    write_field,
)
from .fields import FieldAccessor, FieldTable, attribute_accessor, construct, field_table
from .result import ServiceResult
from .transcoder import MappingTranscoder, Transcoder

__version__ = "0.1.0"

__all__ = [
    "FieldAccessor",
    "FieldTable",
    "MappingTranscoder",
    "ServiceResult",
    "Transcoder",
    "attribute_accessor",
    "changed_fields",
    "clear_fields",
    "construct",
    "convert_to",
    "convert_to_scalar",
    "copy_all_fields",
    "copy_fields",
    "field_table",
    "fields_equal",
    "from_mapping",
    "get_field",
    "has_field",
    "read_field",
    "reset_fields",
    "set_field",
    "to_mapping",
    "write_field",
]
