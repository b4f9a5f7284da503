from fastapi import APIRouter, Depends

from app.api.deps import get_chat_service
from app.schemas.proxy import ChatRequest, ChatResponse
from app.services.chat_service import ChatService

router = APIRouter(tags=["Chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
):
    """Forward a single message to the chat deployment and return its reply."""
    reply = await chat_service.reply(request.message)
    return ChatResponse(reply=reply)
