"""Read-only GraphQL API over the product catalog (Strawberry + FastAPI)."""
