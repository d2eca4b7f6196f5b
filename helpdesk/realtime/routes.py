# helpdesk/realtime/routes.py
import asyncio
import contextlib
import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from helpdesk.auth import services as auth_service
from helpdesk.core.database import SessionLocal
from helpdesk.realtime.broker import Viewer, change_feed

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])

POLICY_VIOLATION = 1008


def _authenticate(token: str) -> Viewer | None:
    with SessionLocal() as db:
        claims = auth_service.validate_token(db, token)
        if claims is None:
            return None
        profile = auth_service.get_profile(db, int(claims["sub"]))
        if profile is None:
            return None
        return Viewer.from_profile(profile)


@router.websocket("/ws/tickets")
async def ticket_changes(websocket: WebSocket, token: str = Query(...)):
    viewer = await run_in_threadpool(_authenticate, token)
    if viewer is None:
        # accept first so the client gets a close frame rather than a 403
        await websocket.accept()
        await websocket.close(code=POLICY_VIOLATION)
        logger.info("Rejected change feed connection with an invalid token")
        return

    # subscribe before accepting so no change slips between the two
    subscription = change_feed.subscribe(viewer)
    try:
        await websocket.accept()

        async def forward():
            while True:
                message = await subscription.queue.get()
                await websocket.send_json(message)

        sender = asyncio.create_task(forward())
        try:
            while True:
                # clients may send keep-alives; the content is ignored
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass
        finally:
            sender.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                try:
                    await sender
                except Exception as exc:
                    logger.warning("Change feed sender for viewer %s failed: %s", viewer.id, exc)
    finally:
        change_feed.unsubscribe(subscription)
