"""
deployment/schemas.py - Request models for the missions API

Pydantic models at module level. Field names follow the wire format
(camelCase) so request bodies validate without aliases.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from fleetops.core.enums import MissionStatus, MissionType

MIN_NAME_LENGTH = 3


class MissionParticipantModel(BaseModel):
    """One participant row: a person, optionally on a ship with roles."""
    model_config = ConfigDict(extra="allow")

    userId: str
    userName: str
    shipId: Optional[str] = None
    shipName: Optional[str] = None
    shipType: Optional[str] = None
    manufacturer: Optional[str] = None
    image: Optional[str] = None
    crewRequirement: Optional[int] = None
    roles: List[str] = []
    isGroundSupport: bool = False

    @field_validator('userId', 'userName')
    @classmethod
    def validate_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError('must not be blank')
        return v


class MissionPayload(BaseModel):
    """Request model for creating or replacing a mission."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: str
    type: str
    status: str = MissionStatus.PLANNING.value
    scheduledDateTime: str
    location: Optional[str] = None
    briefSummary: Optional[str] = None
    details: Optional[str] = None
    leaderId: Optional[str] = None
    leaderName: Optional[str] = None
    images: List[str] = []
    diagramLinks: List[str] = []
    participants: List[MissionParticipantModel] = []
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if len(v.strip()) < MIN_NAME_LENGTH:
            raise ValueError(f'name must be at least {MIN_NAME_LENGTH} characters')
        return v.strip()

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        valid = [t.value for t in MissionType]
        if v not in valid:
            raise ValueError(f'Invalid mission type: {v}. Valid: {valid}')
        return v

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        valid = [s.value for s in MissionStatus]
        if v not in valid:
            raise ValueError(f'Invalid mission status: {v}. Valid: {valid}')
        return v

    @field_validator('scheduledDateTime')
    @classmethod
    def validate_scheduled(cls, v):
        if not v or not v.strip():
            raise ValueError('scheduledDateTime is required')
        return v

    def to_record(self) -> Dict[str, Any]:
        """Plain dict for storage, dropping unset optional fields."""
        return self.model_dump(exclude_none=True)
