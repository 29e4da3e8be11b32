from habittracker.domains.habits.models.habit_models import (
    HABIT_CATEGORIES,
    Habit,
    HabitCompletion,
    HabitMood,
    HabitValue,
)

__all__ = ["HABIT_CATEGORIES", "Habit", "HabitCompletion", "HabitMood", "HabitValue"]
