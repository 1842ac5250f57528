"""ViaCEP postal-code lookup with a TTL cache."""
