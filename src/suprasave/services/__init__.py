"""Service layer exports."""

from .catalog_service import CatalogMatch, CatalogService, select_by_prefix
from .diff_service import compare_flattened, diff_flattened
from .flatten_service import FlattenedSave, flatten_archive
from .reconciler import SaveStateReconciler
from .report_service import archive_to_document, render_json, to_plain

__all__ = [
    "CatalogMatch",
    "CatalogService",
    "FlattenedSave",
    "SaveStateReconciler",
    "archive_to_document",
    "compare_flattened",
    "diff_flattened",
    "flatten_archive",
    "render_json",
    "select_by_prefix",
    "to_plain",
]
