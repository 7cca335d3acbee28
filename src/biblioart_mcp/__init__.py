"""Render and orchestrate book screenplays as scroll-driven visual journeys."""
