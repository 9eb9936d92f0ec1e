"""Infrastructure for timezonecity: configuration, store access and timezone math."""
