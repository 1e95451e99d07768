"""Shared logging utilities."""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit
from uuid import uuid4

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "proxy.log"

_SENSITIVE_HEADER_MARKERS = ("key", "authorization", "cookie", "token")


def write_incoming_log(
    method: str,
    path: str,
    headers: dict[str, str],
    query: dict[str, str],
    *,
    log_root: Path = LOG_ROOT,
) -> Path:
    """Write a single incoming request log entry."""
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "path": path,
        "headers": _redact_headers(headers),
        "query": query,
    }
    return _write_json(_host_folder(log_root / "incoming", query.get("url")), payload)


def write_cli_log(
    level: str,
    message: str,
    *,
    log_file: Path | None = None,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    log_file = log_file or CLI_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with log_file.open("a") as f:
        f.write(line)


def clear_logs(log_root: Path = LOG_ROOT) -> None:
    """Remove the previous run's rolling log."""
    log_file = log_root / CLI_LOG_FILE.name
    if log_file.exists():
        log_file.unlink()


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _host_folder(base: Path, raw_url: str | None) -> Path:
    host = _extract_host(raw_url)
    if host:
        return base / host
    return base


def _extract_host(raw_url: str | None) -> str | None:
    if not raw_url:
        return None
    if "://" not in raw_url:
        raw_url = f"//{raw_url}"
    try:
        host = urlsplit(raw_url).hostname
    except ValueError:
        return None
    if not host:
        return None
    # Keep folder names filesystem-safe
    safe = "".join(c if c.isalnum() or c in ".-" else "_" for c in host)
    return safe.strip(".") or None


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        if any(marker in key.lower() for marker in _SENSITIVE_HEADER_MARKERS):
            redacted[key] = _mask(value)
        else:
            redacted[key] = value
    return redacted


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
