"""Single-statement telemetry listings (usage, learner data, errors, exercises)."""
