# portfolio_api/modules/contact/schemas.py

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator

from portfolio_api.common.utils.global_messages import GlobalMessages

FIELD_MESSAGES: Dict[str, str] = {
    "name": GlobalMessages.NAME_INVALID,
    "email": GlobalMessages.EMAIL_INVALID,
    "subject": GlobalMessages.SUBJECT_INVALID,
    "message": GlobalMessages.MESSAGE_INVALID,
}


class FieldError(BaseModel):
    field: str
    message: str


class ValidationFailed(Exception):
    """One or more contact form fields failed their rule."""

    def __init__(self, errors: List[FieldError]):
        super().__init__(", ".join(error.field for error in errors))
        self.errors = errors


class ContactSubmission(BaseModel):
    """A contact form submission that passed validation."""
    model_config = ConfigDict(frozen=True, validate_default=True)

    # Missing fields default to "" so that absence fails the length rule
    # rather than producing a separate "missing" error.
    name: str = Field(default="", min_length=2, max_length=50)
    email: EmailStr = ""
    subject: str = Field(default="", min_length=2, max_length=100)
    message: str = Field(default="", min_length=5, max_length=1000)

    @field_validator("name", "subject", mode="before")
    def collapse_line(cls, value):
        # Both end up in email headers, which cannot carry line breaks.
        if value is None:
            return ""
        if isinstance(value, str):
            return " ".join(value.split())
        return value

    @field_validator("message", mode="before")
    def strip_text(cls, value):
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("email", mode="before")
    def normalize_email(cls, value):
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip().lower()
        return value


def validate_submission(raw: Any) -> ContactSubmission:
    """
    Validate raw form fields into a ContactSubmission.

    Anything other than a mapping is treated as a form with every field
    missing. Each failing field is reported once, with its own message.

    Raises:
        ValidationFailed: if any field is invalid
    """
    data = raw if isinstance(raw, dict) else {}
    try:
        return ContactSubmission.model_validate(data)
    except ValidationError as e:
        failed: List[str] = []
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else ""
            if field in FIELD_MESSAGES and field not in failed:
                failed.append(field)
        # Keep the form's field order in the response.
        ordered = [field for field in FIELD_MESSAGES if field in failed]
        raise ValidationFailed(
            [FieldError(field=field, message=FIELD_MESSAGES[field]) for field in ordered]
        ) from e


class ContactFormResponse(BaseModel):
    success: bool
    message: str
    errors: Optional[List[FieldError]] = None
