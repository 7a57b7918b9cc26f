"""Serial normalization and eligibility checks shared by buyer and seller forms."""

from .normalize import (
    FormatCheck,
    MODEL_EXAMPLE,
    SERIAL_EXAMPLE,
    SERIAL_EXAMPLE_WITH_DASH,
    detect_dash_in_serial,
    normalize_serial,
    validate_serial_format,
)
from .validator import (
    Classification,
    ClassificationKind,
    SerialCheck,
    SerialValidator,
    classify_serial,
)

__all__ = [
    "Classification",
    "ClassificationKind",
    "FormatCheck",
    "MODEL_EXAMPLE",
    "SERIAL_EXAMPLE",
    "SERIAL_EXAMPLE_WITH_DASH",
    "SerialCheck",
    "SerialValidator",
    "classify_serial",
    "detect_dash_in_serial",
    "normalize_serial",
    "validate_serial_format",
]
