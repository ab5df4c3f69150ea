"""Personal-data API gateway in front of an external vector store."""
