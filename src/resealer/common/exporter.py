import json
from collections import defaultdict
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Any

from .models import Entry

FORMATS = ("json", "md", "txt")

# Field labels (spaces removed, lowercased) rendered with the lock icon
SENSITIVE_KEYS = frozenset({"password", "number", "securitycode", "pincode"})

SECTION_ORDER = ["login", "creditCard", "identity", "wifiPassword", "note", "custom"]


class DataExporter:
    """Renders parsed entries as a JSON, Markdown or plain-text report."""

    def __init__(self, banner: str = "", source: str = ""):
        self.banner = banner.strip() if banner else ""
        self.source = source
        self.timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')

    def export(self, entries: List[Entry], output_path: Path, fmt: str):
        """导出分发器"""
        fmt = fmt.lower()
        if fmt == "json": self._to_json(entries, output_path)
        elif fmt == "md": self._to_markdown(entries, output_path)
        elif fmt == "txt": self._to_text(entries, output_path)
        else:
            raise ValueError(f"Unsupported export format '{fmt}', please use one of: {', '.join(FORMATS)}")

    def _to_json(self, entries: List[Entry], path: Path):
        meta = {"metadata": {"generated_at": self.timestamp, "source": self.source, "count": len(entries)}}
        payload = {**meta, "entries": [e.to_dict() for e in entries]}
        path.write_text(json.dumps(payload, indent=4, ensure_ascii=False), encoding='utf-8')

    def _to_markdown(self, entries: List[Entry], path: Path):
        lines = [f"```\n{self.banner}\n```\n" if self.banner else "# Resealer Import Report"]
        lines.append(f"> **Export Time**: `{self.timestamp}`  \n> **Source**: {self.source or 'unknown'}\n")

        for kind, rows in self._sections(entries).items():
            lines.append(f"\n## {kind} ({len(rows)} items)")
            for i, entry in enumerate(rows, 1):
                lines.append(f"\n### {i}. {self._get_title(entry)}")
                if entry.folder:
                    lines.append(f"- **Folder**: {entry.folder}")
                for label, value in self._fields(entry):
                    if label.lower().replace(" ", "") in SENSITIVE_KEYS:
                        lines.append(f"- **{label}**: 🔐 `{value}`")
                    else:
                        lines.append(f"- **{label}**: {value}")
                lines.append("\n---")
        path.write_text("\n".join(lines), encoding='utf-8')

    def _to_text(self, entries: List[Entry], path: Path):
        lines = [self.banner if self.banner else "RESEALER REPORT"]
        lines.append(f"Export Time: {self.timestamp}\n" + "="*40)
        for kind, rows in self._sections(entries).items():
            lines.append(f"\n[{kind.upper()}]")
            for entry in rows:
                lines.append("-" * 30)
                lines.append(f"{'Title':<18}: {self._get_title(entry)}")
                if entry.folder:
                    lines.append(f"{'Folder':<18}: {entry.folder}")
                for label, value in self._fields(entry):
                    lines.append(f"{label:<18}: {value}")
        path.write_text("\n".join(lines), encoding='utf-8')

    def _sections(self, entries: List[Entry]) -> Dict[str, List[Entry]]:
        grouped = defaultdict(list)
        for entry in entries:
            grouped[entry.type].append(entry)
        return {kind: grouped[kind] for kind in SECTION_ORDER if grouped[kind]}

    def _fields(self, entry: Entry) -> List[Any]:
        data = entry.data.to_dict()
        pairs = []
        for k, v in data.items():
            # 跳过作为标题的字段，避免重复显示
            if not v or k == "title":
                continue
            if k == "customFields":
                pairs.extend(("Custom", c["note"]) for c in v)
            elif isinstance(v, list):
                pairs.append((self._label(k), ", ".join(v)))
            else:
                pairs.append((self._label(k), v))
        return pairs

    def _label(self, key: str) -> str:
        spaced = "".join(f" {c}" if c.isupper() else c for c in key)
        return spaced.strip().title()

    def _get_title(self, entry: Entry) -> str:
        return entry.title or "Unnamed Record"
