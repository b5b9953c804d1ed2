"""Workout program ingestor: turns workout document text into structured templates."""
