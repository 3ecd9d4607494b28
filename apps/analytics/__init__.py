"""Analytics app: read-only revenue and occupancy rollups for operators."""
