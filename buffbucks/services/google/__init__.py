"""Google API clients used by the mint pipeline."""
