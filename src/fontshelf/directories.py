"""Standard font directories per operating system."""

from __future__ import annotations

import os
import platform
from pathlib import Path


def system_font_directories(system: str | None = None) -> list[Path]:
    """Return the standard font directories for ``system`` (default: this OS).

    Directories are returned whether or not they exist; the enumerator skips
    missing ones.
    """
    system = (system or platform.system()).lower()
    directories: list[Path] = []

    if system == "windows":
        directories.append(Path(os.environ.get("WINDIR", "C:\\Windows")) / "Fonts")
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            directories.append(Path(local_app_data) / "Microsoft" / "Windows" / "Fonts")

    elif system == "darwin":
        directories.extend(
            [
                Path("/System/Library/Fonts"),
                Path("/Library/Fonts"),
                Path.home() / "Library" / "Fonts",
            ]
        )

    else:  # Linux and other Unix-like systems
        directories.extend(
            [
                Path("/usr/share/fonts"),
                Path("/usr/local/share/fonts"),
                Path.home() / ".fonts",
                Path.home() / ".local" / "share" / "fonts",
            ]
        )

    return directories
