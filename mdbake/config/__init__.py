from .loader import load_config
from .models import (
    MdBakeConfig,
    OutputConfig,
    ProcessingConfig,
    RenderConfig,
    WatchConfig,
)

__all__ = [
    "MdBakeConfig",
    "OutputConfig",
    "ProcessingConfig",
    "RenderConfig",
    "WatchConfig",
    "load_config",
]
