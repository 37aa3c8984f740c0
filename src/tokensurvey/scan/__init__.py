"""Directory traversal, tokenization and aggregation for `tokensurvey`."""
