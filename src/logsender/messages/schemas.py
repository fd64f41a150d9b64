"""Log event schemas - the internal audit-log message format.

Events arrive on the inbound queue as JSON objects using camelCase field
names (logId, pdlResourceList, enhetsId, ...). The models accept those names
and the snake_case attribute names alike, and always serialize by alias so
payloads written by LogSender can be read back by any producer.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class ActivityType(str, Enum):
    """Kind of access being audited."""
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    PRINT = "PRINT"
    EMERGENCY_ACCESS = "EMERGENCY_ACCESS"
    SIGN = "SIGN"
    REVOKE = "REVOKE"
    SEND = "SEND"
    CONSENT = "CONSENT"

    @property
    def type(self) -> str:
        """Activity text reported to the StoreLog service."""
        return _ACTIVITY_TYPE_TEXT[self]


_ACTIVITY_TYPE_TEXT = {
    ActivityType.CREATE: "Skriva",
    ActivityType.READ: "Läsa",
    ActivityType.UPDATE: "Ändra",
    ActivityType.DELETE: "Radera",
    ActivityType.PRINT: "Utskrift",
    ActivityType.EMERGENCY_ACCESS: "Nödåtkomst",
    ActivityType.SIGN: "Signera",
    ActivityType.REVOKE: "Makulera",
    ActivityType.SEND: "Skicka",
    ActivityType.CONSENT: "Samtycke",
}


class ActivityPurpose(str, Enum):
    """Why the access took place."""
    CARE_TREATMENT = "CARE_TREATMENT"
    ADMINISTRATION = "ADMINISTRATION"
    QUALITY_ASSURANCE = "QUALITY_ASSURANCE"
    STATISTICS = "STATISTICS"
    RESEARCH = "RESEARCH"

    @property
    def type(self) -> str:
        """Purpose text reported to the StoreLog service."""
        return _ACTIVITY_PURPOSE_TEXT[self]


_ACTIVITY_PURPOSE_TEXT = {
    ActivityPurpose.CARE_TREATMENT: "Vård och behandling",
    ActivityPurpose.ADMINISTRATION: "Administration",
    ActivityPurpose.QUALITY_ASSURANCE: "Kvalitetssäkring",
    ActivityPurpose.STATISTICS: "Statistik",
    ActivityPurpose.RESEARCH: "Forskning",
}


class CareUnit(BaseModel):
    """An organizational unit and the care provider it belongs to.

    Immutable.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    unit_id: Optional[str] = Field(
        default=None,
        alias="enhetsId",
        description="Care unit id"
    )
    unit_name: Optional[str] = Field(
        default=None,
        alias="enhetsNamn",
        description="Care unit display name"
    )
    provider_id: Optional[str] = Field(
        default=None,
        alias="vardgivareId",
        description="Care provider id"
    )
    provider_name: Optional[str] = Field(
        default=None,
        alias="vardgivareNamn",
        description="Care provider display name"
    )


class Patient(BaseModel):
    """The patient whose record was accessed.

    Immutable.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    patient_id: str = Field(
        ...,
        alias="patientId",
        description="Civic registration number (personnummer or samordningsnummer)"
    )
    patient_name: Optional[str] = Field(
        default=None,
        alias="patientNamn",
        description="Patient display name"
    )


class Resource(BaseModel):
    """A single accessed resource.

    Immutable, so split events can share the same instance.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    patient: Patient = Field(
        ...,
        description="Patient the resource belongs to"
    )
    resource_type: Optional[str] = Field(
        default=None,
        alias="resourceType",
        description="Resource type tag, e.g. Intyg"
    )
    resource_owner: Optional[CareUnit] = Field(
        default=None,
        alias="resourceOwner",
        description="Care unit owning the resource"
    )


class LogEvent(BaseModel):
    """A single audit-log record."""
    model_config = ConfigDict(populate_by_name=True)

    log_id: str = Field(
        default_factory=lambda: str(uuid4()),
        alias="logId",
        description="Unique log event identifier"
    )

    # System
    system_id: Optional[str] = Field(
        default=None,
        alias="systemId",
        description="Id of the system where the access happened"
    )
    system_name: Optional[str] = Field(
        default=None,
        alias="systemName",
        description="Display name of the system"
    )

    # Activity
    activity_type: ActivityType = Field(
        ...,
        alias="activityType",
        description="Kind of access"
    )
    purpose: ActivityPurpose = Field(
        default=ActivityPurpose.CARE_TREATMENT,
        description="Purpose of the access"
    )
    activity_level: Optional[str] = Field(
        default=None,
        alias="activityLevel",
        description="Optional activity level"
    )
    activity_args: Optional[str] = Field(
        default=None,
        alias="activityArgs",
        description="Optional free-text activity arguments"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the access happened"
    )

    # Actor
    user_id: Optional[str] = Field(
        default=None,
        alias="userId",
        description="Id of the user performing the access"
    )
    user_name: Optional[str] = Field(
        default=None,
        alias="userName",
    )
    user_title: Optional[str] = Field(
        default=None,
        alias="userTitle",
    )
    user_assignment: Optional[str] = Field(
        default=None,
        alias="userAssignment",
    )
    user_care_unit: Optional[CareUnit] = Field(
        default=None,
        alias="userCareUnit",
        description="Care unit the user acted on behalf of"
    )

    resources: List[Resource] = Field(
        default_factory=list,
        alias="pdlResourceList",
        description="Accessed resources, one per patient"
    )

    def copy_with_resource(self, resource: Resource) -> "LogEvent":
        """Copy this event with a fresh log id and a single resource.

        Scalar fields and the user care unit are shared with the source;
        the resource list is a new list.
        """
        return self.model_copy(update={"log_id": str(uuid4()), "resources": [resource]})

    def to_json(self) -> str:
        """Serialize event to its queue payload form."""
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, payload: str) -> "LogEvent":
        """Deserialize event from its queue payload form."""
        return cls.model_validate_json(payload)
