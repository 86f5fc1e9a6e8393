"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Expose a text-generation backend with a single ``generate(prompt)`` call.
- Parse and validate JSON-shaped model output into typed models.
- Report every failure (API error, timeout, bad JSON, wrong shape) as
  ``UpstreamUnavailable`` so callers can fall back deterministically.
"""
