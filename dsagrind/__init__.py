"""DSAGrind authentication and session-lifecycle service."""
