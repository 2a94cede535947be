"""
Clipboard — cross-platform.

Priority:
  1. macOS pbcopy
  2. Wayland wl-copy
  3. X11 xclip / xsel
  4. Log only if no clipboard tool is available
"""
import shutil
import subprocess
import sys
from ocrscan.adapters.clipboard.base import ClipboardAdapter


def _clipboard_command() -> list[str] | None:
    if sys.platform == "darwin":
        return ["pbcopy"]
    if shutil.which("wl-copy"):
        return ["wl-copy"]
    if shutil.which("xclip"):
        return ["xclip", "-selection", "clipboard"]
    if shutil.which("xsel"):
        return ["xsel", "--clipboard", "--input"]
    return None


class SystemClipboard(ClipboardAdapter):
    def __init__(self, status_store):
        self.status = status_store
        self._cmd = _clipboard_command()

    def set_text(self, text: str):
        if self._cmd is None:
            self.status.log("clipboard: no clipboard tool found, skipping")
            return
        try:
            subprocess.run(self._cmd, input=text.encode("utf-8"), check=True, timeout=5)
        except (OSError, subprocess.SubprocessError) as e:
            self.status.log(f"clipboard: {self._cmd[0]} failed: {e}")
            return
        self.status.log(f"clipboard: {len(text)} chars via {self._cmd[0]}")


class MemoryClipboard(ClipboardAdapter):
    def __init__(self, status_store):
        self.status = status_store
        self.text: str | None = None

    def set_text(self, text: str):
        self.text = text
        self.status.log(f"clipboard(memory): {len(text)} chars")
