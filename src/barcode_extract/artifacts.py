from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .contracts import DocumentResult


def default_output_file(pdf_file: Path) -> Path:
    """`<input>.json` next to the input file."""
    return pdf_file.with_name(pdf_file.name + ".json")


def serialize_document_result(result: DocumentResult, *, pretty: bool = False) -> str:
    payload: dict[str, Any] = result.to_dict()
    if pretty:
        return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def write_document_json(*, result: DocumentResult, out_file: Path, pretty: bool = False) -> None:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_document_result(result, pretty=pretty), encoding="utf-8")
