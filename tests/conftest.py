"""Shared fixtures for LogSender tests."""

import json
from typing import List, Optional

import pytest

from logsender.common.config import reset_config
from logsender.messages.schemas import LogEvent

PERSONNUMMER = "19121212-1212"
SAMORDNINGSNUMMER = "19121272-1219"
INVALID_PERSONNUMMER = "19121212-1213"


def make_event_dict(
    patient_ids: Optional[List[str]] = None,
    system_id: str = "SE2321000016-39KJ",
    log_id: str = "log-1",
) -> dict:
    """Build an inbound log event in its JSON form."""
    patient_ids = [PERSONNUMMER] if patient_ids is None else patient_ids
    return {
        "logId": log_id,
        "systemId": system_id,
        "systemName": "Webcert",
        "activityType": "READ",
        "purpose": "CARE_TREATMENT",
        "activityLevel": "Intyg",
        "timestamp": "2026-01-29T10:15:30",
        "userId": "TSTNMT2321000156-1028",
        "userName": "Arnold Johansson",
        "userCareUnit": {
            "enhetsId": "SE4815162344-1A03",
            "enhetsNamn": "WebCert-Enhet1",
            "vardgivareId": "SE4815162344-1A02",
            "vardgivareNamn": "WebCert-Vardgivare1",
        },
        "pdlResourceList": [
            {
                "patient": {"patientId": patient_id, "patientNamn": "Tolvan Tolvansson"},
                "resourceType": "Intyg",
                "resourceOwner": {
                    "enhetsId": "SE4815162344-1A03",
                    "vardgivareId": "SE4815162344-1A02",
                },
            }
            for patient_id in patient_ids
        ],
    }


def make_event_json(**kwargs) -> str:
    return json.dumps(make_event_dict(**kwargs))


def make_event(**kwargs) -> LogEvent:
    return LogEvent.model_validate(make_event_dict(**kwargs))


class FakeTimer:
    """threading.Timer stand-in that only fires when told to."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.name = None
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args, **self.kwargs)


class FakeTimerFactory:
    """Records every timer the aggregator arms."""

    def __init__(self):
        self.timers: List[FakeTimer] = []

    def __call__(self, interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args=args, kwargs=kwargs)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]


@pytest.fixture
def event_json():
    return make_event_json()


@pytest.fixture
def timer_factory():
    return FakeTimerFactory()


@pytest.fixture(autouse=True)
def clean_config():
    reset_config()
    yield
    reset_config()
