"""
Top-level replay configuration model.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from promreplay.models.family import MetricFamily


class ReplayConfig(BaseModel):
    """Declarative description of everything a replayer exposes.

    Unknown keys anywhere in the document are rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    port: int = Field(default=8080, ge=1, le=65535, description="Listen port of the scrape endpoint")
    families: list[MetricFamily] = Field(
        default_factory=list,
        validation_alias=AliasChoices("metrics", "families"),
        description="Metric families to replay",
    )

    def series_count(self) -> int:
        """Total number of series across all families."""
        return sum(len(f.series) for f in self.families)
