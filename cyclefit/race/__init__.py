"""Race training plans with cycle-aware adaptation notes."""

from cyclefit.race.planner import (
    DailyTrainingPlan,
    RaceTrainingPlan,
    RaceTrainingPlanner,
    RaceWorkout,
    RaceWorkoutType,
    TrainingPhase,
    WeeklyTrainingPlan,
    WorkoutIntensity,
)

__all__ = [
    "DailyTrainingPlan",
    "RaceTrainingPlan",
    "RaceTrainingPlanner",
    "RaceWorkout",
    "RaceWorkoutType",
    "TrainingPhase",
    "WeeklyTrainingPlan",
    "WorkoutIntensity",
]
