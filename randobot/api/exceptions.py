"""
Custom exceptions for the API
"""
from fastapi import HTTPException


class DataNotLoadedError(HTTPException):
    def __init__(self):
        super().__init__(status_code=503, detail="Les données ne sont pas encore chargées")


class EmptyMessageError(HTTPException):
    def __init__(self):
        super().__init__(status_code=400, detail="Message manquant")


class MissingUrlError(HTTPException):
    def __init__(self):
        super().__init__(status_code=400, detail="URL manquante dans le corps de la requête")


class CrawlInProgressError(HTTPException):
    def __init__(self):
        super().__init__(status_code=409, detail="Une indexation est déjà en cours")


class IndexingFailedError(HTTPException):
    def __init__(self, detail: str = ""):
        message = "Erreur lors de l'indexation"
        super().__init__(status_code=500, detail=f"{message}: {detail}" if detail else message)
