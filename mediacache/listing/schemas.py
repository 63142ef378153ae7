from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class ArticleList(BaseModel):
    ids: List[str]
    next_token: str = Field(default="", alias="nextToken")

    model_config = ConfigDict(populate_by_name=True)


class ArticleMetrics(BaseModel):
    total: int
    daily_counts: Dict[str, int] = Field(default_factory=dict, alias="dailyCounts")

    model_config = ConfigDict(populate_by_name=True)
