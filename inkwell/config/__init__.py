from .loader import load_config
from .models import (
    AuthorConfig,
    InkwellConfig,
    PaginationConfig,
)

__all__ = [
    "AuthorConfig",
    "InkwellConfig",
    "PaginationConfig",
    "load_config",
]
