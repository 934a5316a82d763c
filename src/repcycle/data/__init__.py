"""Seed data."""

from .catalog import EXERCISES, build_exercise_catalog, seed_exercises

__all__ = ["EXERCISES", "build_exercise_catalog", "seed_exercises"]
