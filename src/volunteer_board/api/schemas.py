"""Pydantic models for board API payloads."""

from pydantic import BaseModel, Field

from volunteer_board.domain.records import RecordDraft


class RecordFieldsPayload(BaseModel):
    """Editable record fields as typed into the form."""

    date: str
    name: str
    organization: str
    hours: str | float
    location: str = ""
    participants: str = ""
    description: str = ""
    photos: list[str] = Field(default_factory=list)

    def to_draft(self, author_name: str = "", author_password: str = "") -> RecordDraft:
        """Convert the payload into a form draft."""
        return RecordDraft(
            date=self.date,
            name=self.name,
            organization=self.organization,
            hours=str(self.hours),
            location=self.location,
            participants=self.participants,
            description=self.description,
            author_name=author_name,
            author_password=author_password,
            photos=list(self.photos),
        )


class RecordCreatePayload(RecordFieldsPayload):
    """New record payload including the author's name and password."""

    author_name: str
    author_password: str


class RecordUpdatePayload(RecordFieldsPayload):
    """Edit payload; the password must match the record's author password."""

    password: str


class CommentCreatePayload(BaseModel):
    """New comment payload."""

    nickname: str
    password: str
    content: str
