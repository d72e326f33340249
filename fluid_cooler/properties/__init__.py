"""Loop fluid and moist air property providers."""
