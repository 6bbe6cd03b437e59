"""
Administration front-end glue: an HTTP client for the management API and
the view-model holding an operator's in-progress edits.
"""
