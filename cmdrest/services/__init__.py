"""Services behind the API and CLI surfaces."""
