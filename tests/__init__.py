"""
Test suite for agent-reasoner.

Covers each reasoning phase in isolation and the engine end to end:
- Complexity analysis, pattern matching and planning
- Validation, reflection and finalization
- Engine state machine, bounds, listeners and failure handling
- Configuration, history archive and CLI
"""
