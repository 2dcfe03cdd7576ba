"""Domain Layer: contracts, models and events with no infrastructure dependencies."""
