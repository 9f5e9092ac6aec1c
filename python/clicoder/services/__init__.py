"""Service layer.

- llm: provider adapters, factory and the LLMService façade
- redact: log-field guard shared by services
"""
