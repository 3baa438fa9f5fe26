from . import (
    canon,
    config,
    exceptions,
    types,
    validate,
    decode,
    ingest,
    stats,
    transform,
    export,
    summary,
)

__all__ = [
    "canon",
    "config",
    "exceptions",
    "types",
    "validate",
    "decode",
    "ingest",
    "stats",
    "transform",
    "export",
    "summary",
]
