from __future__ import annotations

"""Lookup of the alarm sounds bundled in `orbit/assets/`."""

from pathlib import Path


ASSETS_DIR = Path(__file__).resolve().parents[1] / "assets"
SOUND_EXTENSION = ".wav"


def get_asset_path(relative: str) -> Path:
    """Maps a path relative to `assets/` to an absolute one."""
    return ASSETS_DIR / relative


def asset_exists(relative: str) -> bool:
    return get_asset_path(relative).exists()


def alarm_sound_path(sound: str) -> Path | None:
    """Returns the alarm file for `sound`, or `None` when it is muted or missing."""
    if not sound or sound == "none":
        return None
    relative = f"alarm-{sound}{SOUND_EXTENSION}"
    if asset_exists(relative):
        return get_asset_path(relative)
    return None
