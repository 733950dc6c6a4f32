"""
Pydantic schemas for roll tracking and roll statistics.
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Union


class RerollContext(BaseModel):
    """How the roll came about, as reported by the rules system."""
    fortune: bool = Field(default=False, description="Reroll paid for with a fortune point")
    reroll: bool = Field(default=False, description="Any reroll (fortune or dark deal)")


class RollEventSchema(BaseModel):
    """A completed d100 test reported for a user."""
    id: str = Field(..., min_length=1, description="Unique roll id (duplicates are ignored)")
    value: int = Field(..., ge=1, le=100, description="Rolled value (1-100)")
    success: bool = Field(..., description="Whether the test succeeded")
    skill_name: Optional[str] = Field(default=None, description="Skill or characteristic tested")
    reroll_context: RerollContext = Field(default_factory=RerollContext)
    blind: bool = Field(default=False, description="Roll was made blind to the GM")
    is_gm: bool = Field(default=False, description="Roller is a GM")
    username: Optional[str] = Field(default=None, description="Display name of the roller")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "msg_8f2a",
            "value": 44,
            "success": True,
            "skill_name": "Dodge",
            "reroll_context": {"fortune": False, "reroll": False},
            "blind": False,
            "is_gm": False,
            "username": "Kai"
        }
    })


class RollRecordSchema(BaseModel):
    id: str
    value: int
    success: bool
    type: str
    fortune_used_reroll: bool
    dark_deal_reroll: bool


class SaveRollResponse(BaseModel):
    tracked: bool
    record: Optional[RollRecordSchema] = None


class StatsSchema(BaseModel):
    mean: int
    median: Union[int, float]
    mode: List[int]
    mode_count: int
    mode_count_percentage: int
    auto_success: int
    auto_success_percentage: int
    auto_failure: int
    auto_failure_percentage: int
    criticals: int
    criticals_percentage: int
    fumbles: int
    fumbles_percentage: int
    fortune: int
    dark_deal: int
    last_roll: str
    count: int


class RollStatsResponse(BaseModel):
    username: Optional[str] = None
    user_id: str
    stats: StatsSchema
    mode_display: str = Field(..., description="Mode values joined for display")


class RankedUser(BaseModel):
    user_id: str
    name: Optional[str] = None
    value: Union[int, float]
    rolls: int


class MetricComparison(BaseModel):
    highest: List[RankedUser]
    lowest: List[RankedUser]
    average: int


class ComparatorLeader(RankedUser):
    percentage: int
    mode: str


class ComparatorComparison(BaseModel):
    metric: str
    highest: List[ComparatorLeader]
    highest_percentage: List[ComparatorLeader]


class ComparisonResponse(BaseModel):
    mean: MetricComparison
    median: MetricComparison
    auto_success: MetricComparison
    auto_success_percentage: MetricComparison
    auto_failure: MetricComparison
    auto_failure_percentage: MetricComparison
    comparator: ComparatorComparison
    users_compared: int
