from .tables import VERTICAL_COLUMNS, export_summary, summary_to_dict, verticals_to_frame

__all__ = [
    "VERTICAL_COLUMNS",
    "export_summary",
    "summary_to_dict",
    "verticals_to_frame",
]
