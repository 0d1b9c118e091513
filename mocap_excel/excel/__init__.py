"""Grid-level pieces: decoding, header detection, column resolution, normalization."""
