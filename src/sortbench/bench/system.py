"""System characterization for benchmark reproducibility.

Captures the CPU, OS and interpreter a run executed on, and derives the
default worker count from the number of physical cores.

Supports Linux and macOS. Each capture function dispatches to a
platform-specific implementation; unsupported platforms get defaults.
"""

from __future__ import annotations

import json
import os
import platform
import subprocess
import sys
import sysconfig
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from sortbench.logging import get_logger

log = get_logger("bench.system")


# ---------------------------------------------------------------------------
# SystemProfile
# ---------------------------------------------------------------------------


@dataclass
class SystemProfile:
    """Characterization of the machine and interpreter running a benchmark."""

    # CPU
    cpu_model: str = "unknown"
    cpu_cores_physical: int = 0
    cpu_cores_logical: int = 0
    cpu_architecture: str = ""

    # OS
    os_name: str = ""
    os_kernel_version: str = ""

    # Python running the candidates
    python_version: str = ""
    python_implementation: str = ""
    free_threaded: bool = False

    # System state at capture time
    load_avg_1m: float = 0.0
    load_avg_5m: float = 0.0
    load_avg_15m: float = 0.0

    hostname: str = ""
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


# ---------------------------------------------------------------------------
# Core counting
# ---------------------------------------------------------------------------


def _sysctl_int(key: str) -> int | None:
    """Read a sysctl integer value. Returns None on failure."""
    try:
        proc = subprocess.run(
            ["sysctl", "-n", key],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if proc.returncode == 0 and proc.stdout.strip():
            return int(proc.stdout.strip())
    except (OSError, subprocess.SubprocessError, ValueError):
        pass
    return None


def _physical_cores_linux(cpuinfo: str) -> int:
    """Count unique (physical id, core id) pairs in /proc/cpuinfo text."""
    pairs: set[tuple[str, str]] = set()
    current_physical: str | None = None
    for line in cpuinfo.splitlines():
        if line.startswith("physical id"):
            current_physical = line.split(":", 1)[1].strip()
        elif line.startswith("core id") and current_physical is not None:
            pairs.add((current_physical, line.split(":", 1)[1].strip()))
            current_physical = None
    return len(pairs)


def physical_core_count() -> int:
    """Number of physical CPU cores, falling back to the logical count."""
    logical = os.cpu_count() or 1
    count = 0
    if sys.platform == "linux":
        try:
            count = _physical_cores_linux(Path("/proc/cpuinfo").read_text())
        except OSError:
            count = 0
    elif sys.platform == "darwin":
        count = _sysctl_int("hw.physicalcpu") or 0
    if count <= 0:
        # Fallback: assume no hyperthreading.
        count = logical
    return count


def default_worker_count() -> int:
    """Half the physical cores, at least one.

    Leaving cores idle reduces thermal throttling and cross-core cache
    contention while samples are timed.
    """
    return max(1, physical_core_count() // 2)


def is_free_threaded() -> bool:
    """True when the interpreter runs without the GIL."""
    if not sysconfig.get_config_var("Py_GIL_DISABLED"):
        return False
    check = getattr(sys, "_is_gil_enabled", None)
    return check is not None and not check()


# ---------------------------------------------------------------------------
# Capture
# ---------------------------------------------------------------------------


def capture_system_profile() -> SystemProfile:
    """Capture a system profile.

    All operations are best-effort: individual failures produce default
    values rather than exceptions.
    """
    profile = SystemProfile(
        timestamp=time.strftime("%Y-%m-%dT%H:%M:%S%z"),
        hostname=platform.node(),
        cpu_architecture=platform.machine(),
        os_name=platform.system(),
        os_kernel_version=platform.release(),
        python_version=platform.python_version(),
        python_implementation=platform.python_implementation(),
        free_threaded=is_free_threaded(),
        cpu_cores_logical=os.cpu_count() or 0,
        cpu_cores_physical=physical_core_count(),
    )
    profile.cpu_model = _cpu_model()

    # Load averages are POSIX: work on both Linux and macOS.
    try:
        load = os.getloadavg()
        profile.load_avg_1m = round(load[0], 2)
        profile.load_avg_5m = round(load[1], 2)
        profile.load_avg_15m = round(load[2], 2)
    except (AttributeError, OSError):
        pass

    return profile


def _cpu_model() -> str:
    if sys.platform == "linux":
        try:
            for line in Path("/proc/cpuinfo").read_text().splitlines():
                if line.startswith("model name"):
                    return line.split(":", 1)[1].strip()
        except OSError:
            pass
    elif sys.platform == "darwin":
        try:
            proc = subprocess.run(
                ["sysctl", "-n", "machdep.cpu.brand_string"],
                capture_output=True,
                text=True,
                timeout=5,
            )
            if proc.returncode == 0 and proc.stdout.strip():
                return proc.stdout.strip()
        except (OSError, subprocess.SubprocessError):
            pass
    else:
        log.debug("CPU info capture not supported on %s", sys.platform)
    return platform.processor() or "unknown"


def format_system_profile(profile: SystemProfile) -> str:
    """Format a system profile for terminal display."""
    lines = [
        "System Profile",
        "──────────────",
    ]

    cores = f"{profile.cpu_cores_physical} cores"
    if profile.cpu_cores_logical != profile.cpu_cores_physical:
        cores += f" / {profile.cpu_cores_logical} threads"
    lines.append(f"CPU:      {profile.cpu_model} ({cores}, {profile.cpu_architecture})")
    lines.append(f"OS:       {profile.os_name} {profile.os_kernel_version}")
    lines.append(
        f"Load:     {profile.load_avg_1m} / {profile.load_avg_5m} / {profile.load_avg_15m}"
    )

    python = f"Python {profile.python_version} ({profile.python_implementation})"
    if profile.free_threaded:
        python += ", free-threaded"
    lines.append(f"Python:   {python}")

    lines.append(f"Hostname: {profile.hostname}")
    lines.append(f"Time:     {profile.timestamp}")

    return "\n".join(lines)
