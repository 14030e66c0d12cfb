"""HTTP surface of the cmdrest server."""
