"""JSON export of a response.

Why JSON:
- Lets the CLI hand results to other tools and pipelines.
- Keeps the `{statusCode, statusMessage, headers, body}` shape callers expect.
"""

from __future__ import annotations

import json
from pathlib import Path

from servicecall.core.domain.models import NormalizedResponse


def dump_response_json(response: NormalizedResponse) -> str:
    return json.dumps(response.to_dict(), ensure_ascii=False, indent=2, sort_keys=True, default=str)


def export_response_json(*, response: NormalizedResponse, output_path: Path) -> Path:
    """Write a `NormalizedResponse` as UTF-8 JSON with stable formatting."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(dump_response_json(response) + "\n", encoding="utf-8")
    return output_path
