from __future__ import annotations

import asyncio
import itertools
import json
import logging
import ssl
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional

import websockets

LOGGER = logging.getLogger("holdem_client")

# ChatClient speaks JSON-RPC 2.0 to the chat daemon over a single WebSocket.
# Replies are matched to requests by id; inbound group messages arrive as
# "gcm" notifications and are queued for messages().

GC_MESSAGE = "gcm"


@dataclass
class GroupMessage:
    gc_id: str
    uid: str
    nick: str
    text: str


@dataclass
class UserInfo:
    uid: str
    nick: str


class ChatClientError(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


def build_ssl_context(
    server_cert: Optional[str],
    client_cert: Optional[str] = None,
    client_key: Optional[str] = None,
) -> Optional[ssl.SSLContext]:
    if not server_cert:
        return None
    context = ssl.create_default_context(cafile=server_cert)
    if client_cert and client_key:
        context.load_cert_chain(client_cert, client_key)
    return context


class ChatClient:
    def __init__(self, url: str, ssl_context: Optional[ssl.SSLContext] = None, timeout: float = 10.0) -> None:
        self.url = url
        self.ssl_context = ssl_context
        self.timeout = timeout
        self.websocket: Any = None
        self._ids = itertools.count(1)
        self._pending: Dict[int, asyncio.Future] = {}
        self._inbound: asyncio.Queue = asyncio.Queue()
        self._reader: Optional[asyncio.Task] = None

    async def connect(self) -> None:
        kwargs: Dict[str, Any] = {}
        if self.ssl_context is not None:
            kwargs["ssl"] = self.ssl_context
        self.websocket = await websockets.connect(self.url, **kwargs)
        self._reader = asyncio.create_task(self._read_loop())
        LOGGER.info("Connected to chat service at %s", self.url)

    async def close(self) -> None:
        if self._reader:
            self._reader.cancel()
        if self.websocket is not None:
            await self.websocket.close()

    async def call(self, method: str, params: Dict[str, object]) -> Dict[str, Any]:
        if self.websocket is None:
            raise ChatClientError("NOT_CONNECTED", "Chat client is not connected")
        request_id = next(self._ids)
        future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        try:
            await self.websocket.send(
                json.dumps({"jsonrpc": "2.0", "id": request_id, "method": method, "params": params})
            )
            return await asyncio.wait_for(future, timeout=self.timeout)
        finally:
            self._pending.pop(request_id, None)

    # Chat service API ------------------------------------------------

    async def user_info(self, uid: str = "") -> UserInfo:
        """Look up a user; an empty uid returns the bot's own identity."""
        result = await self.call("ChatService.UserInfo", {"uid": uid})
        return UserInfo(uid=str(result.get("uid", "")), nick=str(result.get("nick", "")))

    async def group_members(self, gc_id: str) -> List[str]:
        result = await self.call("GCService.List", {})
        for gc in result.get("gcs", []):
            if gc.get("id") == gc_id:
                return [str(member) for member in gc.get("members", [])]
        return []

    async def send_gc(self, gc_id: str, msg: str) -> None:
        await self.call("ChatService.GCM", {"gc": gc_id, "msg": msg})

    async def send_pm(self, uid: str, msg: str) -> None:
        await self.call("ChatService.PM", {"user": uid, "msg": {"message": msg}})

    async def messages(self) -> AsyncIterator[GroupMessage]:
        while True:
            message = await self._inbound.get()
            if message is None:
                return
            yield message

    # Transport -------------------------------------------------------

    async def _read_loop(self) -> None:
        try:
            async for raw in self.websocket:
                self._dispatch(self._decode(raw))
        except websockets.ConnectionClosed:
            LOGGER.warning("Chat service connection closed")
        finally:
            for future in self._pending.values():
                if not future.done():
                    future.set_exception(ChatClientError("DISCONNECTED", "Connection closed"))
            self._pending.clear()
            self._inbound.put_nowait(None)

    def _dispatch(self, message: Dict[str, Any]) -> None:
        request_id = message.get("id")
        if request_id is not None and request_id in self._pending:
            future = self._pending.pop(request_id)
            if future.done():
                return
            error = message.get("error")
            result = message.get("result")
            if isinstance(error, dict):
                future.set_exception(ChatClientError(str(error.get("code", "RPC_ERROR")), str(error.get("message", ""))))
            elif error:
                future.set_exception(ChatClientError("RPC_ERROR", str(error)))
            else:
                future.set_result(result if isinstance(result, dict) else {})
            return

        if message.get("method") == GC_MESSAGE:
            params = message.get("params") or {}
            nick = str(params.get("nick", ""))
            text = params.get("msg")
            if not text:
                LOGGER.debug("Empty message from %s", nick)
                return
            self._inbound.put_nowait(
                GroupMessage(gc_id=str(params.get("gc", "")), uid=str(params.get("uid", "")), nick=nick, text=str(text))
            )
            return

        LOGGER.debug("Ignoring unexpected message from chat service: %s", message)

    def _decode(self, raw: str) -> Dict[str, Any]:
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            return {}
        return decoded if isinstance(decoded, dict) else {}
