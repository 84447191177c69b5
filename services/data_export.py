# services/data_export.py

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Tuple

from core.analytics import AnalyticsSnapshot
from core.models import CompletionLog, ReflectionLog, ValidationError
from utils.datetime_utils import to_date_key

EXPORT_PREFIX = "routine-backup"

def export_filename(now: datetime) -> str:
    """routine-backup-YYYY-MM-DD.json по текущему локальному дню"""
    return f"{EXPORT_PREFIX}-{to_date_key(now)}.json"

def build_export_payload(history: CompletionLog, reflections: ReflectionLog,
                         snapshot: AnalyticsSnapshot, now: datetime) -> Dict[str, Any]:
    return {
        "history": history.to_dict(),
        "reflections": reflections.to_dict(),
        "exportedAt": now.isoformat(),
        "summary": snapshot.to_summary()
    }

def serialize_export(payload: Dict[str, Any]) -> bytes:
    return json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")

def write_export_file(payload: Dict[str, Any], export_dir: Path, now: datetime) -> Path:
    export_dir.mkdir(parents=True, exist_ok=True)
    filename = export_dir / export_filename(now)
    with open(filename, "wb") as f:
        f.write(serialize_export(payload))
    return filename

def parse_export(raw: bytes) -> Tuple[CompletionLog, ReflectionLog]:
    """Разбор загруженного файла экспорта; ошибки формата -> ValidationError"""
    try:
        data = json.loads(raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError(f"Export file is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise ValidationError("Export file must contain a JSON object")

    for key in ("history", "reflections"):
        if key not in data:
            raise ValidationError(f"Export file has no '{key}' section")
        if not isinstance(data[key], dict):
            raise ValidationError(f"Export section '{key}' must be an object")

    return CompletionLog.from_dict(data["history"]), ReflectionLog.from_dict(data["reflections"])
