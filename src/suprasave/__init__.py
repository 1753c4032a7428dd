"""Decoder and state reconciler for Unreal Engine GVAS save archives."""

from .archive import LoadFailedError, load_save, load_save_file
from .config import ReconcilerConfig, load_config
from .domain import Property, PropertyKind, SaveArchive, SaveState, WorldObjectId, normalize_path
from .services import SaveStateReconciler, compare_flattened, diff_flattened, flatten_archive

__version__ = "0.1.0"

__all__ = [
    "LoadFailedError",
    "Property",
    "PropertyKind",
    "ReconcilerConfig",
    "SaveArchive",
    "SaveState",
    "SaveStateReconciler",
    "WorldObjectId",
    "compare_flattened",
    "diff_flattened",
    "flatten_archive",
    "load_config",
    "load_save",
    "load_save_file",
    "normalize_path",
]
