"""
Pydantic schemas for study sessions.
"""

from typing import Optional

from pydantic import BaseModel, Field

from flashstudy.study.controls import StudyAction


class StudyCardRead(BaseModel):
    """The card currently being shown."""

    id: int = Field(..., description="Card ID")
    front: str = Field(..., description="Question/front side")
    back: str = Field(..., description="Answer/back side")


class StudySessionRead(BaseModel):
    """Everything a client needs to render a study session."""

    session_id: str = Field(..., description="Study session ID")
    deck_id: int = Field(..., description="Deck being studied")
    current_card: Optional[StudyCardRead] = Field(None, description="Card at the current position")
    position: int = Field(..., description="Zero-based position in the session order")
    total_cards: int = Field(..., description="Number of cards in the session")
    progress_percent: int = Field(..., description="Position as a percentage of the deck")
    accuracy_percent: int = Field(..., description="Correct verdicts as a percentage of all verdicts")
    correct_count: int = Field(..., description="Cards marked correct")
    incorrect_count: int = Field(..., description="Cards marked incorrect")
    revealed: bool = Field(..., description="Whether the back of the card is showing")
    answered: bool = Field(..., description="Whether the current card already has a verdict")
    complete: bool = Field(..., description="Whether the session has finished")
    completed_now: bool = Field(
        False,
        description="True only on the response to the event that finished the session",
    )
    handled: bool = Field(
        True,
        description="Whether the input event was acted on (ignored keys report false)",
    )


class StudyActionRequest(BaseModel):
    """A button or card click."""

    action: StudyAction = Field(..., description="Action to perform")
    position: Optional[int] = Field(None, description="Target position for go_to")

    model_config = {
        "json_schema_extra": {
            "example": {
                "action": "grade_correct",
            }
        }
    }


class KeyPressRequest(BaseModel):
    """A key press forwarded by the client."""

    key: str = Field(
        ...,
        min_length=1,
        max_length=32,
        description="KeyboardEvent.key value",
    )
    suppressed: bool = Field(
        False,
        description="True while focus is inside a text-entry field",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "key": "y",
                "suppressed": False,
            }
        }
    }


class StudyExitResponse(BaseModel):
    """Where to send the user after leaving a session."""

    deck_id: int = Field(..., description="Deck that was studied")
    redirect_to: str = Field(..., description="Path of the deck view")
