"""Root conftest for all tests.

This file makes shared program fixtures available across all test modules.
"""

import pytest
from loguru import logger

from fitplan.programs.types import Program


@pytest.fixture(autouse=True)
def quiet_logger():
    """Drop loguru output below WARNING for the duration of a test."""
    logger.remove()
    logger.add(lambda _msg: None, level="WARNING")
    yield
    logger.remove()


def _exercise(exercise_id: str) -> dict:
    return {"exercise_id": exercise_id, "sets": 3, "reps": 10}


@pytest.fixture
def unscheduled_payload() -> dict:
    """Raw generator output: 2 weeks x 3 sessions, no uids, no start times."""
    return {
        "weeks": [
            {
                "week": week,
                "sessions": [
                    {
                        "session": session,
                        "goal": f"Week {week} session {session}",
                        "exercises": [_exercise("squat"), _exercise("row")],
                    }
                    for session in (1, 2, 3)
                ],
            }
            for week in (1, 2)
        ]
    }


@pytest.fixture
def unscheduled_program(unscheduled_payload: dict) -> Program:
    return Program.model_validate(unscheduled_payload)


@pytest.fixture
def scheduled_program() -> Program:
    """Small scheduled program; w1s1 starts 2025-01-02T08:00 for 60 minutes."""
    return Program.model_validate(
        {
            "weeks": [
                {
                    "week": 1,
                    "sessions": [
                        {
                            "session": 1,
                            "uid": "w1s1",
                            "goal": "Full body",
                            "exercises": [_exercise("squat")],
                            "start_at": "2025-01-02T08:00",
                            "duration_minutes": 60,
                        },
                        {
                            "session": 2,
                            "uid": "w1s2",
                            "goal": "Upper body",
                            "exercises": [_exercise("press")],
                            "start_at": "2025-01-04T08:00",
                            "duration_minutes": 45,
                        },
                    ],
                },
                {
                    "week": 2,
                    "sessions": [
                        {
                            "session": 1,
                            "uid": "w2s1",
                            "goal": "Conditioning",
                            "exercises": [],
                            "start_at": "2025-01-07T18:30",
                            "duration_minutes": 30,
                        },
                        {
                            "session": 2,
                            "uid": "w2s2",
                            "goal": "Mobility",
                            "exercises": [],
                        },
                    ],
                },
            ]
        }
    )
