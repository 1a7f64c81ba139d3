"""
Utility modules for the event-management backend.

This package contains shared utilities used across the application:
- logging_config: Named structured loggers
- formatting: Wire timestamp format
- pagination: from/size to offset/limit
- event_locks: Per-event serialization of capacity changes
- client_ip: Caller address and URI for statistics hits
"""
