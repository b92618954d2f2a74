"""Application version information."""

# Semantic Versioning: MAJOR.MINOR.PATCH
VERSION = "1.0.0"
