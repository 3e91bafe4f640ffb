"""
Sound playback via the platform's command-line players.

The custom path from the config wins when it exists; otherwise a stock system
sound is used if one is installed; otherwise nothing is played.
"""

import asyncio
import logging
import os
import platform
from typing import Optional

from opencode_notifier.errors import DispatchError
from opencode_notifier.models.decision import Classification

logger = logging.getLogger("opencode_notifier.transport.sound")

SYSTEM_SOUNDS: dict[str, dict[Classification, str]] = {
    "Darwin": {
        Classification.PERMISSION: "/System/Library/Sounds/Ping.aiff",
        Classification.COMPLETION: "/System/Library/Sounds/Glass.aiff",
        Classification.DELEGATED_COMPLETION: "/System/Library/Sounds/Pop.aiff",
        Classification.ERROR: "/System/Library/Sounds/Basso.aiff",
    },
    "Linux": {
        Classification.PERMISSION: "/usr/share/sounds/freedesktop/stereo/dialog-information.oga",
        Classification.COMPLETION: "/usr/share/sounds/freedesktop/stereo/complete.oga",
        Classification.DELEGATED_COMPLETION: "/usr/share/sounds/freedesktop/stereo/message.oga",
        Classification.ERROR: "/usr/share/sounds/freedesktop/stereo/dialog-error.oga",
    },
    "Windows": {
        Classification.PERMISSION: r"C:\Windows\Media\Windows Notify System Generic.wav",
        Classification.COMPLETION: r"C:\Windows\Media\Windows Notify Calendar.wav",
        Classification.DELEGATED_COMPLETION: r"C:\Windows\Media\Windows Notify Messaging.wav",
        Classification.ERROR: r"C:\Windows\Media\Windows Critical Stop.wav",
    },
}


def resolve_sound_file(classification: Classification, custom_path: Optional[str], system: Optional[str] = None) -> Optional[str]:
    if custom_path and os.path.exists(custom_path):
        return custom_path
    stock = SYSTEM_SOUNDS.get(system or platform.system(), {}).get(classification)
    if stock and os.path.exists(stock):
        return stock
    return None


def player_commands(system: str, sound_path: str, volume: float) -> list[list[str]]:
    """Candidate players in preference order."""
    if system == "Darwin":
        return [["afplay", "-v", f"{volume:.2f}", sound_path]]
    if system == "Linux" or system.endswith("BSD"):
        return [
            ["paplay", f"--volume={int(volume * 65536)}", sound_path],
            ["aplay", "-q", sound_path],
            ["mpv", "--no-video", "--no-terminal", f"--volume={int(volume * 100)}", sound_path],
            ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet", "-volume", str(int(volume * 100)), sound_path],
        ]
    if system == "Windows":
        escaped = sound_path.replace("'", "''")
        return [["powershell", "-c", f"(New-Object Media.SoundPlayer '{escaped}').PlaySync()"]]
    return []


async def _run(cmd: list[str]) -> int:
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.DEVNULL,
        stderr=asyncio.subprocess.DEVNULL,
    )
    return await proc.wait()


async def play_sound(classification: Classification, custom_path: Optional[str], volume: float) -> None:
    """Play the sound for a classification. Raises DispatchError if the player fails."""
    system = platform.system()
    sound_path = resolve_sound_file(classification, custom_path, system)
    if not sound_path:
        logger.debug(f"No sound file for {classification.value}")
        return

    for cmd in player_commands(system, sound_path, volume):
        try:
            code = await _run(cmd)
        except FileNotFoundError:
            continue
        if code != 0:
            raise DispatchError(f"{cmd[0]} exited with {code}", details={"sound": sound_path})
        return

    logger.debug(f"No sound player available on {system}")
