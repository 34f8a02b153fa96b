"""Pydantic models describing the GitHub contents API payloads."""

from __future__ import annotations

import base64
import binascii

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GitHubBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ContentPayload(GitHubBaseModel):
    """``GET /repos/{owner}/{repo}/contents/{path}`` for a single file."""

    type: str = "file"
    path: str
    sha: str
    encoding: str | None = None
    content: str = ""

    @field_validator("content", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    def decoded(self) -> bytes:
        if self.encoding == "none":
            # files over 1 MB come back without inline content
            raise ValueError(f"{self.path} is too large for the contents API")
        if self.encoding not in {None, "base64"}:
            raise ValueError(f"Unsupported content encoding: {self.encoding}")
        if not self.content:
            return b""
        try:
            return base64.b64decode("".join(self.content.split()), validate=True)
        except binascii.Error as exc:
            raise ValueError(f"Malformed base64 content for {self.path}") from exc


class CommitContent(GitHubBaseModel):
    path: str
    sha: str


class WriteResponse(GitHubBaseModel):
    """``PUT .../contents/{path}`` response; only the new blob sha matters."""

    content: CommitContent


class ErrorResponse(GitHubBaseModel):
    message: str = ""
    documentation_url: str | None = Field(default=None)


def encode_content(content: bytes) -> str:
    return base64.b64encode(content).decode("ascii")
