# locations_api/schemas.py

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Any

FEATURE_TYPE = "Feature"
FEATURE_COLLECTION_TYPE = "FeatureCollection"


# JSON null behaves like an absent member and falls back to the zero value.

class Geometry(BaseModel):
    type: str = ""
    # GeoJSON order: [longitude, latitude]
    coordinates: List[float] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def null_type(cls, value):
        return "" if value is None else value

    @field_validator("coordinates", mode="before")
    @classmethod
    def null_coordinates(cls, value):
        return [] if value is None else value


class Properties(BaseModel):
    name: str = ""
    description: str = ""

    @field_validator("name", "description", mode="before")
    @classmethod
    def null_text(cls, value):
        return "" if value is None else value


class LocationFeature(BaseModel):
    id: Any = None
    type: str = ""
    properties: Properties = Field(default_factory=Properties)
    geometry: Geometry = Field(default_factory=Geometry)

    @field_validator("type", mode="before")
    @classmethod
    def null_type(cls, value):
        return "" if value is None else value

    @field_validator("properties", mode="before")
    @classmethod
    def null_properties(cls, value):
        return Properties() if value is None else value

    @field_validator("geometry", mode="before")
    @classmethod
    def null_geometry(cls, value):
        return Geometry() if value is None else value


class FeatureCollection(BaseModel):
    type: str = FEATURE_COLLECTION_TYPE
    features: List[LocationFeature] = Field(default_factory=list)


class InsertResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    inserted_id: str = Field(alias="InsertedID")


class MessageResponse(BaseModel):
    message: str
