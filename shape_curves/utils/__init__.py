"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Bézier geometry kernel (geometry)
    - Config and segment record validation (validators)
    - YAML I/O (fs)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (mutators, commands) at
import time.

Convenience imports:
    from shape_curves.utils import geometry, validators
    from shape_curves.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import geometry
from . import logging_config
from . import validators

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'fs',
    'geometry',
    'logging_config',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
]
