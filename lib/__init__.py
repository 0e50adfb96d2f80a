"""
External collaborators of the extraction pipeline: object storage, the
task store, the layout analysis service, pdf tooling and redis queues.
"""
