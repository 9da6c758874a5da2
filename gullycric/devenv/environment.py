"""
SDK location detection and shell export blocks

Resolves FLUTTER_ROOT, ANDROID_HOME and JAVA_HOME and writes the matching
export lines into a shell rc file between marker comments, so re-running
the export replaces the previous block instead of appending a new one.
"""

import os
import shutil
from pathlib import Path
from typing import Callable, Mapping, Optional, Union

from loguru import logger
from pydantic import BaseModel

from ..config.settings import DevEnvConfig

BEGIN_MARKER = "# >>> gullycric dev environment >>>"
END_MARKER = "# <<< gullycric dev environment <<<"

ANDROID_SDK_CANDIDATES = ["~/Android/Sdk", "/usr/lib/android-sdk"]


class DevEnvironment(BaseModel):
    flutter_root: Optional[str] = None
    android_home: Optional[str] = None
    java_home: Optional[str] = None


def _sdk_root_of(executable: Optional[str]) -> Optional[str]:
    """<root>/bin/<tool> -> <root>, following symlinks."""
    if executable is None:
        return None
    return str(Path(executable).resolve().parent.parent)


def detect_environment(
    cfg: Optional[DevEnvConfig] = None,
    environ: Optional[Mapping[str, str]] = None,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> DevEnvironment:
    """
    Resolve SDK locations.

    Each location comes from the first source that provides it: explicit
    configuration, then environment variables, then the executables on
    PATH (and for Android, the usual install directories).
    """
    cfg = cfg or DevEnvConfig()
    env = os.environ if environ is None else environ

    flutter_root = cfg.flutter_dir or env.get("FLUTTER_ROOT") or _sdk_root_of(which("flutter"))

    android_home = cfg.android_sdk_dir or env.get("ANDROID_HOME") or env.get("ANDROID_SDK_ROOT")
    if not android_home:
        android_home = next(
            (
                str(Path(c).expanduser())
                for c in ANDROID_SDK_CANDIDATES
                if Path(c).expanduser().is_dir()
            ),
            None,
        )

    java_home = cfg.java_home or env.get("JAVA_HOME") or _sdk_root_of(which("java"))

    detected = DevEnvironment(
        flutter_root=flutter_root, android_home=android_home, java_home=java_home
    )
    logger.debug(f"Detected environment: {detected.model_dump()}")
    return detected


def render_exports(env: DevEnvironment) -> str:
    """Shell export block for the detected SDKs, bracketed by the markers."""
    lines = [BEGIN_MARKER]
    if env.flutter_root:
        lines += [
            f'export FLUTTER_ROOT="{env.flutter_root}"',
            'export PATH="$PATH:$FLUTTER_ROOT/bin"',
            'export PATH="$PATH:$FLUTTER_ROOT/bin/cache/dart-sdk/bin"',
        ]
    if env.android_home:
        lines += [
            f'export ANDROID_HOME="{env.android_home}"',
            'export ANDROID_SDK_ROOT="$ANDROID_HOME"',
            'export PATH="$PATH:$ANDROID_HOME/cmdline-tools/latest/bin"',
            'export PATH="$PATH:$ANDROID_HOME/platform-tools"',
        ]
    if env.java_home:
        lines.append(f'export JAVA_HOME="{env.java_home}"')
    lines.append(END_MARKER)
    return "\n".join(lines) + "\n"


def write_exports(rc_file: Union[str, Path], block: str) -> bool:
    """
    Put the export block into an rc file.

    An existing marked block is replaced in place; otherwise the block is
    appended. Returns False when the file already held this exact block.
    """
    rc_path = Path(rc_file).expanduser()
    original = rc_path.read_text(encoding="utf-8") if rc_path.exists() else ""

    start = original.find(BEGIN_MARKER)
    end = original.find(END_MARKER, start if start >= 0 else 0)
    if start >= 0 and end >= 0:
        end += len(END_MARKER)
        if original[end : end + 1] == "\n":
            end += 1
        updated = original[:start] + block + original[end:]
    else:
        separator = "" if not original or original.endswith("\n\n") else (
            "\n" if original.endswith("\n") else "\n\n"
        )
        updated = original + separator + block

    if updated == original:
        logger.info(f"✅ {rc_path} already up to date")
        return False

    rc_path.parent.mkdir(parents=True, exist_ok=True)
    rc_path.write_text(updated, encoding="utf-8")
    logger.info(f"📝 Wrote environment exports to {rc_path}")
    return True
