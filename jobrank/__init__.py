"""
Jobrank: explainable job recommendations for job seekers and employers.

The package is organised as a small pipeline, one sub-package per step:

1. **normalize** – Convert the heterogeneous profile, résumé and
   assessment records held by the profile store into a flat,
   lower-cased `NormalizedProfile`.  The broad education/job category
   classifier shared by the scorer and the fallback catalog lives here
   too.
2. **ingest** – Store interfaces for profiles and postings, plus the
   candidate aggregator which merges live postings with job templates
   when the live pool is thin.
3. **rank** – Five rule-based match detectors and the scorer which
   combines them, the optional LLM refiner that nudges the top few
   results, job-title suggestion, the static fallback catalog and the
   final sort.
4. **pipeline** – Wires the steps together behind
   `get_recommendations(user_id, is_employer)` and owns the decision of
   when to fall back.
5. **cli** – Command line entry point for running the pipeline against a
   fixture file.
"""

from .pipeline import RankingPipeline, get_recommendations, refresh_recommendations  # noqa: F401

__all__ = ["RankingPipeline", "get_recommendations", "refresh_recommendations"]
__version__ = "0.1.0"
