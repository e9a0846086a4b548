"""HTTP API for the turnaround checklist."""
