
class SchemaNotLoadedError(RuntimeError):
    """Raised when a schema helper is used before ``ensure_load`` has completed."""
