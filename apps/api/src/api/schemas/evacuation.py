from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EvacuationPlanRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    crisis_id: str = Field(min_length=1, max_length=128)
    crisis_title: str = Field(min_length=1, max_length=256)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    search_radius_meters: int | None = Field(default=None, gt=0, le=100_000)
    sample_interval: int | None = Field(default=None, ge=1, le=1000)
