"""
User-input validation. Runs before any remote call; a failure means no
request is issued.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath

MIN_PASSWORD_LENGTH = 6


class FormValidationError(Exception):
    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


def _require(value: str | None, field: str, message: str) -> str:
    if value is None or not value.strip():
        raise FormValidationError(message, field)
    return value.strip()


def title_from_filename(file_name: str) -> str:
    """'notes.v2.pdf' -> 'notes.v2'"""
    return PurePath(file_name).stem


@dataclass
class UploadForm:
    file_name: str | None = None
    content: bytes | None = None
    title: str = ""

    def choose_file(self, file_name: str, content: bytes) -> None:
        self.file_name = file_name
        self.content = content
        self.title = title_from_filename(file_name)

    def validate(self) -> tuple[str, str, bytes]:
        if not self.file_name or self.content is None or not self.title.strip():
            raise FormValidationError("Please provide title and file.")
        return self.title.strip(), self.file_name, self.content

    def reset(self) -> None:
        self.file_name = None
        self.content = None
        self.title = ""


def validate_login(email: str, password: str) -> tuple[str, str]:
    email = _require(email, "email", "Please enter your email.")
    if not password:
        raise FormValidationError("Please enter your password.", "password")
    return email, password


def validate_registration(username: str, email: str, password: str) -> tuple[str, str, str]:
    username = _require(username, "username", "Please enter a username.")
    email = _require(email, "email", "Please enter your email.")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise FormValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.", "password"
        )
    return username, email, password


def validate_password_change(current: str, new: str, confirm: str) -> tuple[str, str]:
    if not current:
        raise FormValidationError("Please enter your current password.", "currentPassword")
    if not new:
        raise FormValidationError("Please enter a new password.", "newPassword")
    if new != confirm:
        raise FormValidationError("New passwords do not match.", "confirmNewPassword")
    return current, new


def validate_question_count(num_questions: int | str | None) -> int:
    try:
        count = int(num_questions)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise FormValidationError("Number of questions must be a whole number.", "numQuestions") from None
    if count <= 0:
        raise FormValidationError("Number of questions must be at least 1.", "numQuestions")
    return count


def validate_concept(concept: str) -> str:
    return _require(concept, "concept", "Please enter a concept to explain.")
