"""LogEvent (internal format) -> LogRecord (StoreLog wire format) conversion."""

from typing import Optional

from logsender.messages.civic_number import require_civic_number
from logsender.messages.schemas import CareUnit, LogEvent, Patient, Resource
from logsender.storelog.schemas import (
    ActivityRecord,
    CareProviderRecord,
    CareUnitRecord,
    LogRecord,
    PatientIdentifier,
    PatientRecord,
    ResourceRecord,
    SystemRecord,
    UserRecord,
)


def trim(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


def trim_to_none(value: Optional[str]) -> Optional[str]:
    """Trim a value, returning None if it is blank.

    Blank optional elements are dropped from the wire format instead of being sent empty.
    """
    if value is None:
        return None
    value = value.strip()
    return value or None


class LogRecordConverter:
    """Converts log events to StoreLog records.

    Raises InvalidCivicNumberError when a patient id is not a valid
    personnummer or samordningsnummer.
    """

    def convert(self, source: LogEvent) -> LogRecord:
        return LogRecord(
            log_id=source.log_id,
            system=self._system(source),
            activity=self._activity(source),
            user=self._user(source),
            resources=[self._resource(resource) for resource in source.resources],
        )

    def _system(self, source: LogEvent) -> SystemRecord:
        return SystemRecord(
            system_id=trim(source.system_id),
            system_name=trim_to_none(source.system_name),
        )

    def _activity(self, source: LogEvent) -> ActivityRecord:
        return ActivityRecord(
            activity_type=source.activity_type.type,
            start_date=source.timestamp,
            purpose=source.purpose.type,
            activity_level=trim_to_none(source.activity_level),
            activity_args=trim_to_none(source.activity_args),
        )

    def _user(self, source: LogEvent) -> UserRecord:
        return UserRecord(
            user_id=trim(source.user_id),
            name=trim_to_none(source.user_name),
            title=trim_to_none(source.user_title),
            assignment=trim_to_none(source.user_assignment),
            care_provider=self._care_provider(source.user_care_unit),
            care_unit=self._care_unit(source.user_care_unit),
        )

    def _care_provider(self, unit: Optional[CareUnit]) -> Optional[CareProviderRecord]:
        if unit is None:
            return None
        return CareProviderRecord(
            care_provider_id=trim(unit.provider_id),
            care_provider_name=trim_to_none(unit.provider_name),
        )

    def _care_unit(self, unit: Optional[CareUnit]) -> Optional[CareUnitRecord]:
        if unit is None:
            return None
        return CareUnitRecord(
            care_unit_id=trim(unit.unit_id),
            care_unit_name=trim_to_none(unit.unit_name),
        )

    def _patient(self, source: Patient) -> PatientRecord:
        patient_id = trim(source.patient_id)
        civic_number = require_civic_number(patient_id)
        return PatientRecord(
            patient_id=PatientIdentifier(root=civic_number.root, extension=patient_id),
            patient_name=trim_to_none(source.patient_name),
        )

    def _resource(self, source: Resource) -> ResourceRecord:
        return ResourceRecord(
            resource_type=source.resource_type,
            care_provider=self._care_provider(source.resource_owner),
            care_unit=self._care_unit(source.resource_owner),
            patient=self._patient(source.patient),
        )
