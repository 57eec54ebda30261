"""CocPilot verification service."""
