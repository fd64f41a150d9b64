"""StoreLog wire format - what the downstream audit store accepts."""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        """Dump using wire names, leaving out absent optional values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ResultCode(str, Enum):
    """Result codes returned by the StoreLog service."""
    OK = "OK"
    ERROR = "ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INFO = "INFO"


class SystemRecord(_WireModel):
    system_id: Optional[str] = Field(default=None, alias="systemId")
    system_name: Optional[str] = Field(default=None, alias="systemName")


class ActivityRecord(_WireModel):
    activity_type: str = Field(..., alias="activityType")
    start_date: datetime = Field(..., alias="startDate")
    purpose: str
    activity_level: Optional[str] = Field(default=None, alias="activityLevel")
    activity_args: Optional[str] = Field(default=None, alias="activityArgs")


class CareProviderRecord(_WireModel):
    care_provider_id: Optional[str] = Field(default=None, alias="careProviderId")
    care_provider_name: Optional[str] = Field(default=None, alias="careProviderName")


class CareUnitRecord(_WireModel):
    care_unit_id: Optional[str] = Field(default=None, alias="careUnitId")
    care_unit_name: Optional[str] = Field(default=None, alias="careUnitName")


class UserRecord(_WireModel):
    user_id: Optional[str] = Field(default=None, alias="userId")
    name: Optional[str] = None
    title: Optional[str] = None
    assignment: Optional[str] = None
    care_provider: Optional[CareProviderRecord] = Field(default=None, alias="careProvider")
    care_unit: Optional[CareUnitRecord] = Field(default=None, alias="careUnit")


class PatientIdentifier(_WireModel):
    """Instance identifier: code system root plus the identifier value."""
    root: str
    extension: str


class PatientRecord(_WireModel):
    patient_id: PatientIdentifier = Field(..., alias="patientId")
    patient_name: Optional[str] = Field(default=None, alias="patientName")


class ResourceRecord(_WireModel):
    resource_type: Optional[str] = Field(default=None, alias="resourceType")
    care_provider: Optional[CareProviderRecord] = Field(default=None, alias="careProvider")
    care_unit: Optional[CareUnitRecord] = Field(default=None, alias="careUnit")
    patient: PatientRecord


class LogRecord(_WireModel):
    """One converted log event as sent to StoreLog."""
    log_id: str = Field(..., alias="logId")
    system: SystemRecord
    activity: ActivityRecord
    user: UserRecord
    resources: List[ResourceRecord] = Field(default_factory=list)


class StoreLogResult(_WireModel):
    """Outcome of a single StoreLog call."""
    result_code: Union[ResultCode, str] = Field(
        ...,
        alias="resultCode",
        description="Known ResultCode, or the raw code if the service sent something else"
    )
    result_text: Optional[str] = Field(default=None, alias="resultText")

    @field_validator("result_code", mode="before")
    @classmethod
    def known_code(cls, value):
        try:
            return ResultCode(value)
        except ValueError:
            return value

    @classmethod
    def ok(cls, text: str = "Done") -> "StoreLogResult":
        return cls(result_code=ResultCode.OK, result_text=text)
