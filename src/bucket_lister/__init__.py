"""List Google Cloud Storage buckets for the authenticated project."""

__version__ = "0.1.0"
