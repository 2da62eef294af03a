from .validate import CONFIG, ERROR, INVENTORY, REPORT, load_catalog, schema_path, validate, validate_self

__all__ = ["CONFIG", "ERROR", "INVENTORY", "REPORT", "load_catalog", "schema_path", "validate", "validate_self"]
