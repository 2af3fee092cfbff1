"""Command-line tools for StudyFlow.

- ``python -m studyflow.cli chunk FILE`` -- chunk a plain-text file and
  print the chunk table (or JSON with ``--json``).
- ``python -m studyflow.cli search FILE QUERY`` -- chunk and embed a file
  with the deterministic hash embedder, then rank its chunks against a
  query.

All commands use argparse and construct their own services; they are
one-shot scripts, not long-lived processes.
"""
