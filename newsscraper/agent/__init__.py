"""Agent module - orchestration, retry and request handling."""
