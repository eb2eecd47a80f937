from pydantic import BaseModel, Field


class AIMention(BaseModel):
    """Comment hand-off to the AI responder."""

    content: str = Field(..., description="Full text of the mentioning comment")
    note_id: int = Field(..., description="Note the comment was posted on")
