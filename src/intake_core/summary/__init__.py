"""Admin summary rendering.

Provides ``SummaryRenderer``, a Jinja2-based renderer that turns an answers
record and its derived fields into the staff-facing digest.
"""

from intake_core.summary.renderer import SummaryRenderer

__all__ = ["SummaryRenderer"]
