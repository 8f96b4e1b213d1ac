"""Core telemetry models: typed properties, event logs and attachments."""
