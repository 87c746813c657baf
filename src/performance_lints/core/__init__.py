"""
Core Package.

Contains the lint orchestration logic:
- Lint Engine
- CST name helpers shared by the analyzers
"""
