from src.services import pantry_service


__all__ = [
    "pantry_service",
]
