from __future__ import annotations

from .optional_deps import optional_import, require
from .param_check import check_dimension_order, check_region

__all__ = ["check_dimension_order", "check_region", "optional_import", "require"]
