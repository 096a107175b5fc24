"""Business logic for authentication and todos."""
