"""
Test Suite for LaserPrint

Unit tests for the clocks, animators and panel state machine, orchestrator
behaviour tests, display list and scene tests, and property-based tests of
the reveal invariants.
"""
