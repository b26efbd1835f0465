"""Model and migration generation from MySQL schemas."""
