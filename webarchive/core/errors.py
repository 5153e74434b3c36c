"""Erreurs du data layer (les routers les traduisent en status HTTP)"""


class ArchiveError(Exception):
    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(ArchiveError):
    """Entrée invalide, rejetée avant de toucher la DB"""


class NotFoundError(ArchiveError):
    """Page / tag / dossier / lien de partage introuvable"""


class ConflictError(ArchiveError):
    """Contrainte d'unicité violée (nom de tag, share code, credential admin)"""


class StoreError(ArchiveError):
    """Erreur I/O, timeout ou transaction côté DB"""
