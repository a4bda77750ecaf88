"""
Request and response models for the frontend API.
"""

from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class VariantPayload(BaseModel):
    """Payload attached to a variant."""
    type: str
    value: str


class Variant(BaseModel):
    """Evaluated variant of a toggle."""
    name: str
    enabled: bool
    payload: Optional[VariantPayload] = None


class ToggleEntry(BaseModel):
    """A feature toggle as returned to frontend SDKs."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    enabled: bool
    variant: Optional[Variant] = None
    impression_data: bool = Field(default=False, alias="impressionData")


class FrontendFeaturesSchema(BaseModel):
    """Response body of the feature listing endpoint."""
    toggles: List[ToggleEntry]


class ToggleMetrics(BaseModel):
    """Per-toggle exposure counts."""
    model_config = ConfigDict(extra="allow")

    yes: int = Field(ge=0)
    no: int = Field(ge=0)
    variants: Dict[str, int] = Field(default_factory=dict)


class MetricsBucket(BaseModel):
    """Time bucket of toggle metrics."""
    model_config = ConfigDict(extra="allow")

    start: datetime
    stop: datetime
    toggles: Dict[str, ToggleMetrics]


class FrontendMetricsSchema(BaseModel):
    """Metrics reported by a frontend SDK."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    app_name: str = Field(alias="appName")
    instance_id: str = Field(alias="instanceId")
    environment: Optional[str] = None
    bucket: MetricsBucket


class FrontendClientSchema(BaseModel):
    """Client registration sent by a frontend SDK."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    app_name: str = Field(alias="appName")
    instance_id: Optional[str] = Field(default=None, alias="instanceId")
    sdk_version: Optional[str] = Field(default=None, alias="sdkVersion")
    environment: Optional[str] = None
    interval: float
    started: Union[datetime, float]
    strategies: List[str]


class NotImplementedSchema(BaseModel):
    """Body of the 405 stub response."""
    message: str

