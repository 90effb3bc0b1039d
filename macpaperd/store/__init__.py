"""desktoppicture.db construction.

- `schema`: table, index and trigger definitions
- `database`: connection wrapper, store creation, identity rows
- `encoder`: wallpaper request -> data rows and preference keys
- `builder`: pictures and preferences for every slot
- `swap`: installing the built store over the live one
"""

from .builder import BuildReport, build, picture_slots
from .database import WallpaperStore, create_store, populate_identities
from .encoder import (
    ColorSpec,
    DynamicMode,
    EncodedPreferences,
    ImageSpec,
    Orientation,
    PreferenceKey,
    encode,
    parse_hex_color,
)
from .exceptions import (
    BuildError,
    EncodingError,
    MacpaperdError,
    NoIdentityData,
    ProviderError,
    StorageInitError,
    SwapFailed,
)
from .swap import backup_store, commit

__all__ = [
    "BuildError",
    "BuildReport",
    "ColorSpec",
    "DynamicMode",
    "EncodedPreferences",
    "EncodingError",
    "ImageSpec",
    "MacpaperdError",
    "NoIdentityData",
    "Orientation",
    "PreferenceKey",
    "ProviderError",
    "StorageInitError",
    "SwapFailed",
    "WallpaperStore",
    "backup_store",
    "build",
    "commit",
    "create_store",
    "encode",
    "parse_hex_color",
    "picture_slots",
    "populate_identities",
]
