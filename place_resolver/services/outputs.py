"""CI 출력 채널 기록."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from place_resolver.schemas.issue import RunOutputs


def write_outputs(outputs: RunOutputs, output_file: str | Path | None, stream: TextIO | None = None) -> None:
    """GITHUB_OUTPUT 파일에 key=value를 추가합니다. 파일이 없으면 레거시 형식으로 출력합니다."""
    pairs = outputs.as_pairs()
    if output_file:
        with Path(output_file).open("a", encoding="utf-8") as file:
            for key, value in pairs:
                file.write(f"{key}={value}\n")
        return

    target = stream or sys.stdout
    for key, value in pairs:
        target.write(f"::set-output name={key}::{value}\n")
    target.flush()
