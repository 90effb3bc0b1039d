"""Live display and Space discovery through CoreGraphics and SkyLight (macOS).

SkyLight is a private framework; the few functions used here are the ones
the window server has exposed unchanged for years:

- ``SLSMainConnectionID``: connection to the window server
- ``SLSCopyManagedDisplaySpaces``: CFArray of per-display dictionaries with
  ``Display Identifier`` and ``Spaces`` (dictionaries with ``id64``)
- ``SLSSpaceCopyName``: the Space UUID for an ``id64``
- ``SLSSpaceGetType``: 4 for fullscreen Spaces
"""

from __future__ import annotations

import ctypes
import platform

from macpaperd.store.exceptions import ProviderError
from macpaperd.utils.logging import logger

from . import Display, Workspace

CORE_FOUNDATION = "/System/Library/Frameworks/CoreFoundation.framework/CoreFoundation"
CORE_GRAPHICS = "/System/Library/Frameworks/CoreGraphics.framework/CoreGraphics"
COLOR_SYNC = "/System/Library/Frameworks/ColorSync.framework/ColorSync"
SKYLIGHT = "/System/Library/PrivateFrameworks/SkyLight.framework/SkyLight"

K_CF_STRING_ENCODING_UTF8 = 0x08000100
K_CF_NUMBER_SINT64_TYPE = 4
SPACE_TYPE_FULLSCREEN = 4
MAX_DISPLAYS = 32


class _Frameworks:
    """ctypes bindings, loaded once per provider."""

    def __init__(self):
        try:
            self.cf = ctypes.cdll.LoadLibrary(CORE_FOUNDATION)
            self.cg = ctypes.cdll.LoadLibrary(CORE_GRAPHICS)
            self.sls = ctypes.cdll.LoadLibrary(SKYLIGHT)
        except OSError as e:
            raise ProviderError(f"Cannot load system frameworks: {e}") from e

        vp = ctypes.c_void_p
        cf = self.cf
        cf.CFRelease.argtypes = [vp]
        cf.CFRelease.restype = None
        cf.CFStringGetLength.argtypes = [vp]
        cf.CFStringGetLength.restype = ctypes.c_long
        cf.CFStringGetMaximumSizeForEncoding.argtypes = [ctypes.c_long, ctypes.c_uint32]
        cf.CFStringGetMaximumSizeForEncoding.restype = ctypes.c_long
        cf.CFStringGetCString.argtypes = [vp, ctypes.c_char_p, ctypes.c_long, ctypes.c_uint32]
        cf.CFStringGetCString.restype = ctypes.c_bool
        cf.CFStringCreateWithCString.argtypes = [vp, ctypes.c_char_p, ctypes.c_uint32]
        cf.CFStringCreateWithCString.restype = vp
        cf.CFArrayGetCount.argtypes = [vp]
        cf.CFArrayGetCount.restype = ctypes.c_long
        cf.CFArrayGetValueAtIndex.argtypes = [vp, ctypes.c_long]
        cf.CFArrayGetValueAtIndex.restype = vp
        cf.CFDictionaryGetValue.argtypes = [vp, vp]
        cf.CFDictionaryGetValue.restype = vp
        cf.CFNumberGetValue.argtypes = [vp, ctypes.c_long, vp]
        cf.CFNumberGetValue.restype = ctypes.c_bool
        cf.CFUUIDCreateString.argtypes = [vp, vp]
        cf.CFUUIDCreateString.restype = vp

        cg = self.cg
        cg.CGGetActiveDisplayList.argtypes = [
            ctypes.c_uint32,
            ctypes.POINTER(ctypes.c_uint32),
            ctypes.POINTER(ctypes.c_uint32),
        ]
        cg.CGGetActiveDisplayList.restype = ctypes.c_int32

        # Moved to ColorSync on newer systems; CoreGraphics still re-exports it on older ones.
        try:
            self.create_uuid = cg.CGDisplayCreateUUIDFromDisplayID
        except AttributeError:
            self.create_uuid = ctypes.cdll.LoadLibrary(COLOR_SYNC).CGDisplayCreateUUIDFromDisplayID
        self.create_uuid.argtypes = [ctypes.c_uint32]
        self.create_uuid.restype = vp

        sls = self.sls
        sls.SLSMainConnectionID.argtypes = []
        sls.SLSMainConnectionID.restype = ctypes.c_int
        sls.SLSCopyManagedDisplaySpaces.argtypes = [ctypes.c_int]
        sls.SLSCopyManagedDisplaySpaces.restype = vp
        sls.SLSSpaceCopyName.argtypes = [ctypes.c_int, ctypes.c_uint64]
        sls.SLSSpaceCopyName.restype = vp
        sls.SLSSpaceGetType.argtypes = [ctypes.c_int, ctypes.c_uint64]
        sls.SLSSpaceGetType.restype = ctypes.c_int

    def cfstring(self, text: str) -> int:
        return self.cf.CFStringCreateWithCString(None, text.encode(), K_CF_STRING_ENCODING_UTF8)

    def to_str(self, ref: int | None) -> str | None:
        if not ref:
            return None
        length = self.cf.CFStringGetLength(ref)
        size = self.cf.CFStringGetMaximumSizeForEncoding(length, K_CF_STRING_ENCODING_UTF8) + 1
        buf = ctypes.create_string_buffer(size)
        if not self.cf.CFStringGetCString(ref, buf, size, K_CF_STRING_ENCODING_UTF8):
            return None
        return buf.value.decode()

    def to_int64(self, ref: int | None) -> int | None:
        if not ref:
            return None
        value = ctypes.c_int64()
        if not self.cf.CFNumberGetValue(ref, K_CF_NUMBER_SINT64_TYPE, ctypes.byref(value)):
            return None
        return value.value

    def array(self, ref: int | None) -> list[int]:
        if not ref:
            return []
        return [
            self.cf.CFArrayGetValueAtIndex(ref, i) for i in range(self.cf.CFArrayGetCount(ref))
        ]


class SkyLightProvider:
    """Query the window server for the active displays and their Spaces."""

    def __init__(self):
        self._fw: _Frameworks | None = None

    def _frameworks(self) -> _Frameworks:
        if platform.system() != "Darwin":
            raise ProviderError(
                "Display discovery needs macOS; use --from-store to read identities from a store"
            )
        if self._fw is None:
            self._fw = _Frameworks()
        return self._fw

    def _active_display_ids(self, fw: _Frameworks) -> list[int]:
        ids = (ctypes.c_uint32 * MAX_DISPLAYS)()
        count = ctypes.c_uint32(0)
        err = fw.cg.CGGetActiveDisplayList(MAX_DISPLAYS, ids, ctypes.byref(count))
        if err != 0:
            raise ProviderError(f"CGGetActiveDisplayList failed with CGError {err}", details={"cg_error": err})
        return list(ids[: count.value])

    def _display_uuid(self, fw: _Frameworks, display_id: int) -> str | None:
        uuid_ref = fw.create_uuid(display_id)
        if not uuid_ref:
            return None
        try:
            string_ref = fw.cf.CFUUIDCreateString(None, uuid_ref)
            try:
                return fw.to_str(string_ref)
            finally:
                if string_ref:
                    fw.cf.CFRelease(string_ref)
        finally:
            fw.cf.CFRelease(uuid_ref)

    def _space(self, fw: _Frameworks, cid: int, space_dict: int, id64_key: int) -> Workspace | None:
        sid = fw.to_int64(fw.cf.CFDictionaryGetValue(space_dict, id64_key))
        if sid is None:
            return None
        name_ref = fw.sls.SLSSpaceCopyName(cid, sid)
        if not name_ref:
            return None
        try:
            uuid = fw.to_str(name_ref)
        finally:
            fw.cf.CFRelease(name_ref)
        if uuid is None:
            return None
        return Workspace(uuid=uuid, is_fullscreen=fw.sls.SLSSpaceGetType(cid, sid) == SPACE_TYPE_FULLSCREEN)

    def _managed_spaces(self, fw: _Frameworks, cid: int) -> dict[str, tuple[Workspace, ...]]:
        """Map display identifier -> Spaces, skipping displays that cannot be read."""
        managed = fw.sls.SLSCopyManagedDisplaySpaces(cid)
        if not managed:
            raise ProviderError("SLSCopyManagedDisplaySpaces returned nothing")

        keys = {name: fw.cfstring(name) for name in ("Display Identifier", "Spaces", "id64")}
        result: dict[str, tuple[Workspace, ...]] = {}
        try:
            for display_dict in fw.array(managed):
                identifier = fw.to_str(fw.cf.CFDictionaryGetValue(display_dict, keys["Display Identifier"]))
                if identifier is None:
                    logger.warning("Skipping a managed display without identifier")
                    continue
                space_dicts = fw.array(fw.cf.CFDictionaryGetValue(display_dict, keys["Spaces"]))
                spaces = [space for d in space_dicts if (space := self._space(fw, cid, d, keys["id64"]))]
                if len(spaces) != len(space_dicts):
                    logger.warning("Skipping display {}: unreadable Space entries", identifier)
                    continue
                result[identifier] = tuple(spaces)
        finally:
            for ref in keys.values():
                if ref:
                    fw.cf.CFRelease(ref)
            fw.cf.CFRelease(managed)
        return result

    def list_displays(self) -> list[Display]:
        fw = self._frameworks()
        display_ids = self._active_display_ids(fw)
        cid = fw.sls.SLSMainConnectionID()
        spaces_by_display = self._managed_spaces(fw, cid)

        displays = []
        for index, display_id in enumerate(display_ids, 1):
            uuid = self._display_uuid(fw, display_id)
            if uuid is None or uuid not in spaces_by_display:
                logger.warning("Error retrieving display {} (id: {}), skipping", index, display_id)
                continue
            displays.append(Display(uuid=uuid, workspaces=spaces_by_display[uuid]))
        return displays
