"""
Desktop notifications via the platform's notifier binary.

Linux/BSD: notify-send. macOS: osascript. Windows: PowerShell toast.
"""

import asyncio
import logging
import platform
from typing import Optional

from opencode_notifier.errors import DispatchError
from opencode_notifier.models.session import DEFAULT_TITLE

logger = logging.getLogger("opencode_notifier.transport.notify")

NOTIFICATION_TITLE = DEFAULT_TITLE
APP_NAME = "opencode-notifier"
NOTIFIER_TIMEOUT_S = 10.0


def _escape_applescript(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _escape_powershell(value: str) -> str:
    return value.replace("'", "''")


def build_command(
    system: str,
    message: str,
    timeout_s: float,
    image_path: Optional[str] = None,
    session_title: Optional[str] = None,
) -> Optional[list[str]]:
    """Argument vector for the given platform.system() value, or None if unsupported."""
    title = NOTIFICATION_TITLE
    subtitle = session_title if session_title and session_title != NOTIFICATION_TITLE else None

    if system == "Linux" or system.endswith("BSD"):
        summary = f"{title}: {subtitle}" if subtitle else title
        cmd = ["notify-send", "--app-name", APP_NAME, "--expire-time", str(int(timeout_s * 1000))]
        if image_path:
            cmd += ["--icon", image_path]
        return cmd + [summary, message]

    if system == "Darwin":
        script = f'display notification "{_escape_applescript(message)}" with title "{_escape_applescript(title)}"'
        if subtitle:
            script += f' subtitle "{_escape_applescript(subtitle)}"'
        return ["osascript", "-e", script]

    if system == "Windows":
        heading = f"{title}: {subtitle}" if subtitle else title
        ps = (
            "[Windows.UI.Notifications.ToastNotificationManager, Windows.UI.Notifications, ContentType = WindowsRuntime] | Out-Null; "
            "$t = [Windows.UI.Notifications.ToastNotificationManager]::GetTemplateContent([Windows.UI.Notifications.ToastTemplateType]::ToastText02); "
            f"$t.GetElementsByTagName('text')[0].AppendChild($t.CreateTextNode('{_escape_powershell(heading)}')) | Out-Null; "
            f"$t.GetElementsByTagName('text')[1].AppendChild($t.CreateTextNode('{_escape_powershell(message)}')) | Out-Null; "
            "[Windows.UI.Notifications.ToastNotificationManager]::CreateToastNotifier('OpenCode').Show([Windows.UI.Notifications.ToastNotification]::new($t))"
        )
        return ["powershell", "-NoProfile", "-Command", ps]

    return None


async def send_notification(
    message: str,
    timeout_s: float,
    image_path: Optional[str] = None,
    session_title: Optional[str] = None,
) -> None:
    """Show a desktop notification. Raises DispatchError if the notifier fails."""
    system = platform.system()
    cmd = build_command(system, message, timeout_s, image_path, session_title)
    if cmd is None:
        logger.warning(f"Unsupported platform for notifications: {system}")
        return

    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
        _, stderr = await asyncio.wait_for(proc.communicate(), timeout=NOTIFIER_TIMEOUT_S)
    except FileNotFoundError:
        raise DispatchError(f"Notifier not installed: {cmd[0]}", details={"command": cmd[0]})
    except asyncio.TimeoutError:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()
        raise DispatchError(f"{cmd[0]} timed out")

    if proc.returncode != 0:
        detail = (stderr or b"").decode(errors="replace").strip()[:200]
        raise DispatchError(f"{cmd[0]} exited with {proc.returncode}: {detail}")
    logger.debug(f"Notification sent: {message}")
