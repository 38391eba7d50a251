"""Routing of parsed intents to calendar / email / task actions."""
