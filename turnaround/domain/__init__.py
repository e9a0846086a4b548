"""Domain layer for the turnaround checklist.

Entities, value models, event payloads and errors. Nothing in this package
performs I/O or reads the wall clock; time always arrives as a parameter.
"""
