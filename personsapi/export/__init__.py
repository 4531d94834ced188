from .csv_export import EXPORT_FILENAME, EXPORT_MEDIA_TYPE, flatten_person, render_csv, write_export

__all__ = [
    "EXPORT_FILENAME",
    "EXPORT_MEDIA_TYPE",
    "flatten_person",
    "render_csv",
    "write_export",
]
