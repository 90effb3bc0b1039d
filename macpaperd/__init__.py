"""macpaperd - set the macOS Dock wallpaper by rebuilding desktoppicture.db."""

__version__ = "0.3.0"
