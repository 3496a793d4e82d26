"""
CV Hjelper Backend.

Core components:
- agents: Analysis, customization, validation and correction agents
- api: FastAPI application and route handlers
- tools: PDF text extraction
- utils: JSON extraction from free-text model output
"""
