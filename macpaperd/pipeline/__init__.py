"""Console output shared by the commands."""
