"""TechCareer service tier: event and instructor management."""
