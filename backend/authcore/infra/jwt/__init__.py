"""PyJWT token issuer."""
