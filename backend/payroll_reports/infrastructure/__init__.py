"""Process-wide plumbing: the async database engine and logging setup."""
