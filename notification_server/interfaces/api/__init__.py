"""HTTP interface exposed with FastAPI."""
