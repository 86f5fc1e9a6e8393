"""
Chat-to-recommendation pipeline.

Responsibilities:
- Turn a group chat into a structured preference profile.
- Plan place searches from that profile.
- Gather candidates, enrich them with place details and personalise them.
- Suggest activities for the group independently of the place search.

Every stage backed by a generative model has a deterministic fallback, so
the pipeline always returns a complete, well-shaped result.
"""
