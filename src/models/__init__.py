"""
Domain models - messages, sessions, structured payloads, multi-agent state
"""
