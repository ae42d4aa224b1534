"""
Erreurs remontées par le cœur client (formulaire d'upload, client REST).
"""
from typing import Dict, Optional


class PortfolioClientError(Exception):
    """Base de toutes les erreurs du cœur client."""


class ValidationError(PortfolioClientError):
    """Erreurs de validation champ par champ (affichées à côté des champs)."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid artwork data: {fields}")


class FileTooLarge(PortfolioClientError):
    def __init__(self, filename: str, size: int, limit: int):
        self.filename = filename
        self.size = size
        self.limit = limit
        super().__init__(f"{filename} is {size} bytes, limit is {limit} bytes")


class InvalidFileType(PortfolioClientError):
    def __init__(self, filename: str, content_type: str):
        self.filename = filename
        self.content_type = content_type
        super().__init__(f"{filename} is not an image ({content_type or 'unknown type'})")


class MissingImage(PortfolioClientError):
    def __init__(self):
        super().__init__("Please select an image file.")


class SubmissionInProgress(PortfolioClientError):
    """Un envoi est déjà en cours pour ce formulaire."""

    def __init__(self):
        super().__init__("An upload is already in progress.")


class RemoteDataError(PortfolioClientError):
    """Échec d'un appel à l'API (statut non 2xx, réseau ou timeout)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class FetchError(RemoteDataError):
    pass


class UploadError(RemoteDataError):
    pass
