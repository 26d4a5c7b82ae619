"""Constants shared by the expression engine."""

import re

# ============================================================================
# Environment
# ============================================================================

REFERENCE_VARIABLE = "reference"  # seeded from the document's referenceLevel
DEFAULT_REFERENCE_LEVEL = 0.0

# ============================================================================
# Numeric Syntax
# ============================================================================

# Plain decimal float: optional sign, digits with optional fraction, optional exponent
FLOAT_LITERAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# ============================================================================
# Function Library
# ============================================================================

DECIBEL_FLOOR = -144.0  # decibel(0), roughly the 24-bit noise floor
