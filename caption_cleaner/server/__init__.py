"""HTTP API (FastAPI) for fetching, normalizing and exporting transcripts."""
