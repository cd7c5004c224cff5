"""
agent - Tool-calling orchestration layer.

Contains the operation registry, the executor that runs one operation,
the system prompt, and the orchestrator that runs the model+tool loop.
Depends on domain/ and application/. Never imports from infrastructure/.
"""
