"""
Real Functionality Tests Package.

These tests drive the actual components (monitor task, dispatcher,
greeting loop, orchestrator) with only the Telegram side mocked.
"""
