"""
Agent workflows module.
Intent routing, handler pipelines and the Team-of-Experts orchestrator.
"""
