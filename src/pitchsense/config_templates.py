"""Configuration file templates."""

CONFIG_TEMPLATE = """# pitchsense configuration
# Every value below is optional; the commented value is the default.

[pitch]
# Field rectangle in field units (origin at the top-left corner)
width = 1000.0
height = 600.0

[scheduler]
# One agent's view is captured per interval, rotating through all agents
capture_interval_ms = 500
# One decision request is dispatched per interval
decision_interval_s = 5.0
# Captures kept per agent (5-10, oldest dropped first)
capture_capacity = 10
# Most recent captures attached to a decision request
max_capture_refs = 3
# A decision that takes longer is abandoned and the old strategy kept
decision_timeout_s = 30.0

[profiles]
# Slot holding the active custom physics profile (absent = default physics)
slot_path = "~/.pitchsense/active_profile.json"
# Minimum seconds between re-reads of the slot
poll_interval_s = 1.0

[collaborator]
model = "claude-sonnet-4-5"
max_tokens = 500
temperature = 0.7
# Environment variable holding the API key
api_key_env = "ANTHROPIC_API_KEY"
"""
