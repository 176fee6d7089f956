"""Export/import of setting values to a flat text artifact."""

from .settings_codec import (
    EXPORT_FILE_NAME,
    ExportResult,
    ImportResult,
    export_settings,
    import_settings,
)

__all__ = [
    "EXPORT_FILE_NAME",
    "ExportResult",
    "ImportResult",
    "export_settings",
    "import_settings",
]
