"""
Shared fixtures: a schedule data document and helpers to write it to disk.
"""

import copy
import json
from pathlib import Path

import pytest
import yaml

STORE_DATA = {
    "professionals": [
        {
            "id": "dietitian-1",
            "name": "Ada Okafor",
            "role": "DIETITIAN",
            "schedules": [
                {
                    "id": "working-hours",
                    "name": "Working hours",
                    "timezone": "Africa/Lagos",
                    "active": True,
                    "is_default": True,
                    "slots": [
                        {"day_of_week": 1, "start_time": "09:00:00", "end_time": "17:00:00", "enabled": True},
                        {"day_of_week": 2, "start_time": "09:00:00", "end_time": "12:00:00", "enabled": True},
                        {"day_of_week": 3, "start_time": "09:00:00", "end_time": "12:00:00", "enabled": False},
                    ],
                },
                {
                    "id": "evenings",
                    "name": "Evenings",
                    "timezone": "Africa/Lagos",
                    "active": True,
                    "is_default": False,
                    "slots": [
                        {"day_of_week": 1, "start_time": "18:00", "end_time": "20:00", "enabled": True},
                    ],
                },
            ],
            "overrides": [
                {
                    "override_date": "2024-11-26",
                    "is_unavailable": False,
                    "slots": [{"start_time": "10:00", "end_time": "11:00"}],
                },
                {"override_date": "2024-12-03", "is_unavailable": True},
            ],
            "out_of_office": [
                {"start_date": "2024-12-09", "end_date": "2024-12-10"},
            ],
            "bookings": [
                {"start_time": "2024-11-25T12:00:00+01:00", "end_time": "2024-11-25T13:00:00+01:00", "status": "CONFIRMED"},
                {"start_time": "2024-11-25T14:00:00+01:00", "end_time": "2024-11-25T15:00:00+01:00", "status": "CANCELLED"},
                {"start_time": "2024-11-25T18:00:00+01:00", "end_time": "2024-11-25T19:00:00+01:00", "status": "pending"},
                {"start_time": "2025-01-06T09:00:00Z", "end_time": "2025-01-06T10:00:00Z", "status": "CONFIRMED"},
            ],
        },
        {
            "id": "therapist-1",
            "name": "Bola Adeyemi",
            "role": "THERAPIST",
            "schedules": [
                {
                    "id": "paused",
                    "name": "Paused",
                    "timezone": "Africa/Lagos",
                    "active": False,
                    "is_default": True,
                    "slots": [
                        {"day_of_week": 1, "start_time": "09:00", "end_time": "17:00"},
                    ],
                },
            ],
        },
    ],
    "event_types": [
        {"id": "consultation", "user_id": "dietitian-1", "title": "Consultation", "duration_minutes": 60},
        {
            "id": "evening-check-in",
            "user_id": "dietitian-1",
            "title": "Evening check-in",
            "duration_minutes": 30,
            "availability_schedule_id": "evenings",
        },
        {
            "id": "stale-link",
            "user_id": "dietitian-1",
            "title": "Stale link",
            "duration_minutes": 45,
            "availability_schedule_id": "deleted-schedule",
        },
        {"id": "therapy-session", "user_id": "therapist-1", "title": "Therapy", "duration_minutes": 50},
    ],
}


@pytest.fixture
def store_data():
    """A fresh, mutable copy of the sample schedule document."""
    return copy.deepcopy(STORE_DATA)


@pytest.fixture
def write_data_file(tmp_path: Path):
    """Write a document as JSON or YAML and return its path."""

    def _write(data, name: str = "schedules.yaml") -> Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix == ".json":
                json.dump(data, f)
            else:
                yaml.safe_dump(data, f)
        return path

    return _write
