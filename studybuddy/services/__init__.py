"""Service layer: request understanding, orchestration, generation, learning."""
