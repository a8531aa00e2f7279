from enum import Enum
from typing import Annotated, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# inf and nan would be written to the blob as null
Score = Union[int, Annotated[float, Field(allow_inf_nan=False)], str]


class Difficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class Entry(BaseModel):
    """One leaderboard record, stored exactly as submitted apart from the tier."""

    model_config = ConfigDict(frozen=True)

    username: str
    score: Score
    time: str
    difficulty: str


class Leaderboard(BaseModel):
    users: List[Entry] = []


# --------- Request / response schemas ----------
class SubmitIn(BaseModel):
    username: Optional[str] = None
    score: Optional[Score] = None
    time: Optional[str] = None
    difficulty: Optional[str] = None


class SubmitOut(BaseModel):
    success: bool
    message: str
