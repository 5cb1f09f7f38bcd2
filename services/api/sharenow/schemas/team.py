"""Schemas for team tags and team preferences."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from sharenow.schemas.common import validate_tags

TEAM_TAGS_MAX_COUNT = 5

DigestFrequency = Literal["Weekly", "Monthly"]


class TeamTagUpdate(BaseModel):
    """Body of POST /api/teamtag."""

    team_id: str = Field(alias="teamId", min_length=1)
    tags: str = ""

    model_config = {"populate_by_name": True}

    @field_validator("tags")
    @classmethod
    def _validate_tags(cls, v: str) -> str:
        return validate_tags(v, max_count=TEAM_TAGS_MAX_COUNT) or ""


class TeamTagResponse(BaseModel):
    team_id: str = Field(alias="teamId")
    tags: str
    service_url: str = Field(alias="serviceUrl")
    user_aad_id: str | None = Field(alias="userAadId", default=None)
    created_by_name: str | None = Field(alias="createdByName", default=None)
    created_date: datetime = Field(alias="createdDate")

    model_config = {"populate_by_name": True, "from_attributes": True}


class TeamPreferenceDetails(BaseModel):
    """Preference sent by the configure-preferences task module."""

    team_id: str = Field(alias="teamId", min_length=1)
    digest_frequency: DigestFrequency = Field(alias="digestFrequency")
    tags: str = ""

    model_config = {"populate_by_name": True}

    @field_validator("tags")
    @classmethod
    def _validate_tags(cls, v: str) -> str:
        return validate_tags(v, max_count=TEAM_TAGS_MAX_COUNT) or ""


class TaskModuleSubmit(BaseModel):
    """Data of a task module submit activity."""

    command: str | None = None
    configure_details: TeamPreferenceDetails | None = Field(alias="configureDetails", default=None)

    model_config = {"populate_by_name": True}


class TeamPreferenceResponse(BaseModel):
    team_id: str = Field(alias="teamId")
    digest_frequency: str = Field(alias="digestFrequency")
    tags: str
    created_date: datetime = Field(alias="createdDate")
    updated_date: datetime = Field(alias="updatedDate")
    updated_by_name: str | None = Field(alias="updatedByName", default=None)
    updated_by_object_id: str | None = Field(alias="updatedByObjectId", default=None)

    model_config = {"populate_by_name": True, "from_attributes": True}
