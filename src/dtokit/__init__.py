"""dtokit — typed, validated data transfer objects from untrusted input."""

__version__ = "0.1.0"

from dtokit.domain.errors import (  # noqa: E402
    DtoError,
    MetadataLookupError,
    SchemaConfigurationError,
    ValidationError,
)
from dtokit.domain.fields import FieldMeta, dto_field  # noqa: E402
from dtokit.dto import BaseDto  # noqa: E402

__all__ = [
    "BaseDto",
    "DtoError",
    "FieldMeta",
    "MetadataLookupError",
    "SchemaConfigurationError",
    "ValidationError",
    "__version__",
    "dto_field",
]
