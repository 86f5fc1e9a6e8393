"""
Google Places integration.

Responsibilities:
- Nearby, text and detail lookups against the Places web service.
- Normalise raw results into the basic and detail projections used by the
  recommendation pipeline.
"""
