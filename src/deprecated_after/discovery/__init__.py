from .runtime import discover_imported, iter_modules, records_from_module
from .static import DEFAULT_MARKER_NAMES, discover_static, module_name_for, scan_source

DISCOVERY_MODES = ("static", "import")

__all__ = [
    "DEFAULT_MARKER_NAMES",
    "DISCOVERY_MODES",
    "discover_imported",
    "discover_static",
    "iter_modules",
    "module_name_for",
    "records_from_module",
    "scan_source",
]
