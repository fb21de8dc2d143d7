from fastapi import Depends, Request

from poolscore.core.exceptions import StoreNotConfiguredError
from poolscore.db.repository import ScoreStore
from poolscore.services.score_service import ScoreService


def get_store(request: Request) -> ScoreStore:
    """The store constructed by create_app. Missing credentials turn every data endpoint into a 503."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreNotConfiguredError()
    return store


def get_service(store: ScoreStore = Depends(get_store)) -> ScoreService:
    return ScoreService(store)
