"""GitHub 이슈 입력과 실행 결과 스키마."""

from __future__ import annotations

from pydantic import BaseModel, Field

UPDATE_TITLE_MARKER = "[更新]"
UPDATE_BODY_MARKER = "更新地点"
BOT_NAME = "github-actions[bot]"
BOT_EMAIL = "github-actions[bot]@users.noreply.github.com"


class CommitIdentity(BaseModel):
    """커밋 작성자 정보."""

    name: str = Field(..., description="커밋 작성자 이름")
    email: str = Field(..., description="커밋 작성자 이메일")

    @property
    def author_string(self) -> str:
        return f"{self.name} <{self.email}>"


class IssueContext(BaseModel):
    """처리 대상 이슈 정보.

    Fields:
        number: 이슈 번호
        title: 이슈 제목 (업데이트 마커 포함 가능)
        body: 이슈 폼 본문
        author_login / author_name / author_email: 제출자 정보 (이름/이메일은 선택)
    """

    number: int = Field(..., description="이슈 번호")
    title: str = Field(default="", description="이슈 제목")
    body: str = Field(default="", description="이슈 본문")
    author_login: str = Field(default="", description="작성자 로그인")
    author_name: str = Field(default="", description="작성자 이름")
    author_email: str = Field(default="", description="작성자 이메일")

    @property
    def is_update(self) -> bool:
        """제목의 [更新] 마커나 본문의 更新地点 문구로 업데이트 요청을 판별합니다."""
        return UPDATE_TITLE_MARKER in self.title or UPDATE_BODY_MARKER in self.body

    def commit_identity(self) -> CommitIdentity:
        """제출자 정보로 커밋 작성자를 만듭니다. 정보가 없으면 봇 계정을 사용합니다."""
        login = self.author_login.strip()
        name = self.author_name.strip() or login or BOT_NAME
        if self.author_email.strip():
            email = self.author_email.strip()
        elif login:
            email = f"{login}@users.noreply.github.com"
        else:
            email = BOT_EMAIL
        return CommitIdentity(name=name, email=email)


class RunOutputs(BaseModel):
    """CI 출력 채널로 내보내는 실행 결과."""

    branch_name: str | None = None
    place_title: str | None = None
    is_update: bool = False
    error: bool = False
    error_message: str | None = None

    def as_pairs(self) -> list[tuple[str, str]]:
        """출력 key/value 목록을 정해진 순서로 반환합니다."""
        if self.error:
            return [
                ("error", "true"),
                ("error_message", _single_line(self.error_message or "Unknown error")),
            ]
        return [
            ("branch_name", self.branch_name or ""),
            ("place_title", _single_line(self.place_title or "")),
            ("is_update", "true" if self.is_update else "false"),
            ("error", "false"),
        ]


def _single_line(value: str) -> str:
    return value.replace("\r", " ").replace("\n", " ")
