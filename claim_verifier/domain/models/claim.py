"""Domain model for extracted claims."""

from pydantic import BaseModel, ConfigDict, Field


class Claim(BaseModel):
    """A single atomic factual statement extracted from input text."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "text": "The Eiffel Tower is located in Paris.",
                "index": 0,
            }
        },
    )

    text: str = Field(..., description="The claim text to be verified")
    index: int = Field(..., ge=0, description="Position of the claim within its batch")
