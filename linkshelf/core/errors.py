"""
Erreurs métier de l'API.

Chaque erreur porte son code HTTP et un message court pour le client.
Les échecs du fetch / de l'IA ne sont PAS des erreurs: ils sont absorbés
par le pipeline (voir services/result.py).
"""

from fastapi import status


class LinkShelfError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str = None):
        if message:
            self.message = message
        super().__init__(self.message)


class ValidationError(LinkShelfError):
    # entrée invalide, aucun I/O n'a été fait
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class AuthError(LinkShelfError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid or expired token"

    def __init__(self, message: str = None, status_code: int = None):
        if status_code:
            self.status_code = status_code
        super().__init__(message)


class NotFoundError(LinkShelfError):
    # absent OU pas à l'user, on ne fait pas la différence
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class ConflictError(LinkShelfError):
    # le client attend un 400 pour un doublon
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Already exists"


class InternalError(LinkShelfError):
    # panne du store: 500 générique, le détail reste dans les logs
    pass
