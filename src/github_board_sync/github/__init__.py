"""GitHub API access used by the board sync."""
