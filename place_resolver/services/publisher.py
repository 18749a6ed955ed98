"""git 브랜치 생성/커밋/푸시 단계."""

from __future__ import annotations

import subprocess
import time
from pathlib import Path
from typing import Callable, Sequence

from place_resolver.core.exceptions import PublicationError
from place_resolver.core.logger import get_logger
from place_resolver.schemas.issue import CommitIdentity
from place_resolver.schemas.place import Place

logger = get_logger(__name__)

CommandRunner = Callable[..., subprocess.CompletedProcess]


def build_branch_name(place_id: str, is_update: bool, timestamp_ms: int | None = None) -> str:
    """`auto-<add|update>-<id>-<timestamp>` 형식의 브랜치 이름을 만듭니다."""
    stamp = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    action = "update" if is_update else "add"
    return f"auto-{action}-{place_id}-{stamp}"


def build_commit_message(title: str, is_update: bool) -> str:
    return f"{'Update' if is_update else 'Add'}: {title}"


class GitPublisher:
    """작업 디렉터리에서 git 명령을 순서대로 실행합니다."""

    def __init__(
        self,
        workspace: str | Path = ".",
        *,
        data_file: str = "data/places.toon",
        images_dir: str = "images",
        runner: CommandRunner | None = None,
    ) -> None:
        self._workspace = Path(workspace)
        self._data_file = data_file
        self._images_dir = images_dir
        self._runner = runner or subprocess.run

    def _git(self, *args: str) -> None:
        command: Sequence[str] = ("git", *args)
        logger.info("Running: %s", " ".join(command))
        try:
            self._runner(list(command), cwd=self._workspace, check=True)
        except subprocess.CalledProcessError as exc:
            raise PublicationError(f"git {args[0]} failed with exit code {exc.returncode}") from exc
        except OSError as exc:
            raise PublicationError(f"git {args[0]} could not be executed: {exc}") from exc

    def publish(
        self,
        place: Place,
        *,
        is_update: bool,
        identity: CommitIdentity,
        image_added: bool,
        timestamp_ms: int | None = None,
    ) -> str:
        """변경 사항을 새 브랜치에 커밋하고 푸시합니다. 브랜치 이름을 반환합니다.

        Raises:
            PublicationError: git 단계 중 하나라도 실패한 경우.
        """
        branch_name = build_branch_name(place.id, is_update, timestamp_ms)

        self._git("config", "user.name", identity.name)
        self._git("config", "user.email", identity.email)
        self._git("checkout", "-b", branch_name)
        self._git("add", self._data_file)
        if image_added:
            self._git("add", f"{self._images_dir}/{place.id}/")
        self._git(
            "commit",
            "-m",
            build_commit_message(place.title, is_update),
            f"--author={identity.author_string}",
        )
        self._git("push", "origin", branch_name)

        logger.info("Successfully created branch: %s", branch_name)
        return branch_name
