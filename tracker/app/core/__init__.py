SERVICE_NAME = "session_tracker"
