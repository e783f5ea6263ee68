"""Cyclefit: cycle-phase calculation and cycle-aware fitness planning."""
