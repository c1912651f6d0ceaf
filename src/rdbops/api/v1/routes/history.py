from fastapi import APIRouter, Depends

from ....storage.history import HistoryStore
from ...dependencies import get_history_store
from ..schemas.ops import HistoryResponse

router = APIRouter(tags=["history"])


@router.get("/history", response_model=HistoryResponse)
async def analysis_history(history: HistoryStore = Depends(get_history_store)) -> HistoryResponse:
    return HistoryResponse(history=[entry.model_dump(mode="json") for entry in history.all()])
