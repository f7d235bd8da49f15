"""agentforms: conversational data-collection engine.

Collects a structured schema of typed fields from a visitor through
free-form chat: extracts candidate values from visitor text, validates
them, tracks completion, and streams the agent's reply under rate and
abuse controls.
"""

__version__ = "0.1.0"
