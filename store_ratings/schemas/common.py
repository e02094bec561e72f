import re
from typing import Annotated

from pydantic import AfterValidator, BaseModel, EmailStr, Field

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 16
_PASSWORD_SPECIAL_RE = re.compile(r"[!@#$%^&*]")
_PASSWORD_UPPER_RE = re.compile(r"[A-Z]")


def _check_password_policy(value: str) -> str:
    if not _PASSWORD_UPPER_RE.search(value) or not _PASSWORD_SPECIAL_RE.search(value):
        raise ValueError(
            "Password must contain at least one uppercase letter and one special character"
        )
    return value


def _normalize_email(value: str) -> str:
    return value.strip().lower()


Name = Annotated[str, Field(min_length=20, max_length=60)]
Address = Annotated[str, Field(max_length=400)]
RecordId = Annotated[int, Field(ge=1, le=2**31 - 1)]
Email = Annotated[EmailStr, AfterValidator(_normalize_email)]
Password = Annotated[
    str,
    Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH),
    AfterValidator(_check_password_policy),
]


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class MessageResponse(BaseModel):
    message: str
