"""intake_server: FastAPI REST API for project intake submissions."""
