"""Services — read-only environment probes."""
