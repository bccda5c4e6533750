"""Workout programs: payload schema, validation, storage and scheduling."""

from fitplan.programs.types import ExerciseInstance, Program, ProgramSession, ProgramWeek, SchedulingPreferences

__all__ = [
    "ExerciseInstance",
    "Program",
    "ProgramSession",
    "ProgramWeek",
    "SchedulingPreferences",
]
