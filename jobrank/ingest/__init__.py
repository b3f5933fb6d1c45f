"""
Ingest subsystem for jobrank.

`stores` defines the read interfaces the pipeline consumes (profile
store and posting store) together with an in-memory implementation
backed by a YAML/JSON fixture.  `candidates` maps raw posting and
template rows into `Candidate` records and merges them into one pool.
"""

from .stores import InMemoryStore, PostingStore, ProfileStore, load_raw_profile  # noqa: F401
from .candidates import CandidatePool, aggregate_candidates  # noqa: F401
