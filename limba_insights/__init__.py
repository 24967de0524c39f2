"""limba-insights: read-only analytics over language-learning content and telemetry."""

__version__ = "0.1.0"
