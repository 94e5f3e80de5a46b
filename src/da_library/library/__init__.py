"""Library sheets: paths, keyed read-modify-write and site config registration."""

from da_library.library.manager import LibrarySheetManager
from da_library.library.paths import (
    CONTENT_DOMAIN,
    DEFAULT_BASE_FOLDER,
    build_library_config_url,
    build_public_url,
    build_storage_path,
)
from da_library.library.registrar import ConfigShape, SiteConfigRegistrar, ensure_library_sheet

__all__ = [
    "CONTENT_DOMAIN",
    "DEFAULT_BASE_FOLDER",
    "ConfigShape",
    "LibrarySheetManager",
    "SiteConfigRegistrar",
    "build_library_config_url",
    "build_public_url",
    "build_storage_path",
    "ensure_library_sheet",
]
