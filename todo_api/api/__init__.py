"""HTTP routes for the todo resource."""
