"""Core run machinery: configuration, audit trail and command execution."""
