"""Wallpaper request -> (data rows, preference keys) encoding.

The Dock reads a picture's configuration as a set of ``preferences`` rows,
each pairing an integer key with a row of the ``data`` table. The keys and
the value encodings below are the Dock's, not ours.

``encode`` is pure: it returns the scalars to append to ``data`` and, for
each key, the *offset* of its scalar in that sequence. The builder turns
offsets into the row ids it actually got back when inserting, so the two
halves stay in lock-step without ever looking values up by content.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, IntEnum
from types import MappingProxyType

from .exceptions import EncodingError

Scalar = str | int | float


class PreferenceKey(IntEnum):
    """Meaning of ``preferences.key``."""

    IMAGE_FILE = 1
    ORIENTATION = 2
    COLOR_RED = 3
    COLOR_GREEN = 4
    COLOR_BLUE = 5
    FOLDER = 10
    TRANSPARENCY = 15
    DYNAMIC = 20


class Orientation(Enum):
    """How the image is fitted to the screen."""

    FULL = "full"
    TILE = "tile"
    CENTER = "center"
    STRETCH = "stretch"
    FIT = "fit"

    @property
    def code(self) -> int:
        return ORIENTATION_CODES[self]


class DynamicMode(Enum):
    """Appearance-dependent variant selection for dynamic (HEIC) wallpapers."""

    NONE = "none"
    DYNAMIC = "dynamic"
    LIGHT = "light"
    DARK = "dark"

    @property
    def code(self) -> int:
        return DYNAMIC_CODES[self]


# 1 is not a valid orientation code.
ORIENTATION_CODES = MappingProxyType({
    Orientation.FULL: 0,
    Orientation.TILE: 2,
    Orientation.CENTER: 3,
    Orientation.STRETCH: 4,
    Orientation.FIT: 5,
})

DYNAMIC_CODES = MappingProxyType({
    DynamicMode.NONE: 0,
    DynamicMode.DYNAMIC: 1,
    DynamicMode.LIGHT: 2,
    DynamicMode.DARK: 3,
})

SOLID_COLORS_FOLDER = "/System/Library/Desktop Pictures/Solid Colors"
TRANSPARENT_PLACEHOLDER = (
    "/System/Library/PreferencePanes/DesktopScreenEffectsPref.prefPane/Contents/Resources/"
    "DesktopPictures.prefPane/Contents/Resources/Transparent.tiff"
)

IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".tiff", ".heic"})
DYNAMIC_EXTENSIONS = frozenset({".heic"})

# Offsets into the data rows of each variant, in the order the Dock writes them.
IMAGE_LAYOUT = (
    (PreferenceKey.FOLDER, 0),
    (PreferenceKey.DYNAMIC, 1),
    (PreferenceKey.IMAGE_FILE, 2),
)

COLOR_LAYOUT = (
    (PreferenceKey.TRANSPARENCY, 2),
    (PreferenceKey.IMAGE_FILE, 3),
    (PreferenceKey.COLOR_RED, 4),
    (PreferenceKey.COLOR_GREEN, 5),
    (PreferenceKey.COLOR_BLUE, 6),
    (PreferenceKey.FOLDER, 0),
    (PreferenceKey.DYNAMIC, 1),
)

_HEX_COLOR = re.compile(r"#?([0-9A-Fa-f]{6})")


@dataclass(frozen=True)
class ColorSpec:
    """A flat background color, channels 0..255."""

    r: int
    g: int
    b: int

    def channels(self) -> tuple[float, float, float]:
        """Channels normalized to 0.0..1.0."""
        return (self.r / 255, self.g / 255, self.b / 255)


@dataclass(frozen=True)
class ImageSpec:
    """An image file, optionally with a color shown around a non-full fit."""

    path: str
    orientation: Orientation = Orientation.FULL
    dynamic_mode: DynamicMode = DynamicMode.NONE
    flat_color: ColorSpec | None = None


WallpaperSpec = ImageSpec | ColorSpec


@dataclass(frozen=True)
class EncodedPreferences:
    """Output of :func:`encode`.

    ``keys`` pairs each preference key with an offset into ``data_rows``.
    """

    data_rows: tuple[Scalar, ...]
    keys: tuple[tuple[int, int], ...]

    def __post_init__(self):
        for key, offset in self.keys:
            if not 0 <= offset < len(self.data_rows):
                raise ValueError(f"Key {key} points at offset {offset} outside the data rows")

    @property
    def key_count(self) -> int:
        return len(self.keys)


def parse_hex_color(text: str) -> ColorSpec:
    """Parse ``RRGGBB`` (optionally ``#RRGGBB``) into a :class:`ColorSpec`."""
    match = _HEX_COLOR.fullmatch(text.strip())
    if not match:
        raise EncodingError(
            f"Invalid hex color: {text!r} (expected 6 hex digits, e.g. FF8000)",
            details={"value": text},
        )
    value = int(match.group(1), 16)
    return ColorSpec((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def _validate_color(color: ColorSpec) -> None:
    for name in ("r", "g", "b"):
        channel = getattr(color, name)
        if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
            raise EncodingError(
                f"Color channel {name}={channel!r} is not an integer in 0..255",
                details={"channel": name, "value": channel},
            )


def _extension(path: str) -> str:
    name = path.rpartition("/")[2]
    stem, dot, ext = name.rpartition(".")
    return f".{ext.lower()}" if dot and stem else ""


def _validate_image(spec: ImageSpec) -> None:
    if not spec.path.startswith("/"):
        raise EncodingError(
            f"Wallpaper path must be absolute: {spec.path}", details={"path": spec.path}
        )
    ext = _extension(spec.path)
    if ext not in IMAGE_EXTENSIONS:
        raise EncodingError(
            f"Unsupported image format {ext or '<none>'!r} for {spec.path}; "
            f"expected one of {', '.join(sorted(IMAGE_EXTENSIONS))}",
            details={"path": spec.path, "extension": ext},
        )
    if spec.dynamic_mode is not DynamicMode.NONE and ext not in DYNAMIC_EXTENSIONS:
        raise EncodingError(
            f"Dynamic mode {spec.dynamic_mode.value!r} needs a dynamic (.heic) image, got {spec.path}",
            details={"path": spec.path, "dynamic_mode": spec.dynamic_mode.value},
        )
    if spec.flat_color is not None:
        _validate_color(spec.flat_color)
        if spec.orientation is Orientation.FULL:
            raise EncodingError(
                f"A background color needs a non-full orientation, got {spec.orientation.value!r}",
                details={"path": spec.path, "orientation": spec.orientation.value},
            )


def _encode_image(spec: ImageSpec) -> EncodedPreferences:
    folder = spec.path.rpartition("/")[0]
    rows: list[Scalar] = [folder, spec.dynamic_mode.code, spec.path]
    keys = [(int(key), offset) for key, offset in IMAGE_LAYOUT]

    if spec.orientation is not Orientation.FULL:
        keys.append((int(PreferenceKey.ORIENTATION), len(rows)))
        rows.append(spec.orientation.code)

    if spec.flat_color is not None:
        for key, channel in zip(
            (PreferenceKey.COLOR_RED, PreferenceKey.COLOR_GREEN, PreferenceKey.COLOR_BLUE),
            spec.flat_color.channels(),
            strict=True,
        ):
            keys.append((int(key), len(rows)))
            rows.append(channel)

    return EncodedPreferences(tuple(rows), tuple(keys))


def _encode_color(spec: ColorSpec) -> EncodedPreferences:
    rows: tuple[Scalar, ...] = (
        SOLID_COLORS_FOLDER,
        DynamicMode.NONE.code,
        1,
        TRANSPARENT_PLACEHOLDER,
        *spec.channels(),
    )
    return EncodedPreferences(rows, tuple((int(key), offset) for key, offset in COLOR_LAYOUT))


def encode(spec: WallpaperSpec) -> EncodedPreferences:
    """Encode a wallpaper request into data rows and (key, offset) pairs.

    Raises:
        EncodingError: the request cannot be represented (bad path, format,
            dynamic mode on a static image, out-of-range color).
    """
    if isinstance(spec, ColorSpec):
        _validate_color(spec)
        return _encode_color(spec)
    if isinstance(spec, ImageSpec):
        _validate_image(spec)
        return _encode_image(spec)
    raise EncodingError(f"Unsupported wallpaper spec: {type(spec).__name__}")


def describe_key(key: int) -> str:
    """Readable name for a preference key, for diagnostics."""
    try:
        return PreferenceKey(key).name.lower()
    except ValueError:
        return f"unknown({key})"
