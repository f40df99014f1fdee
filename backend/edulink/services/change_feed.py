"""
Flux de changements en mémoire (abonnements temps réel).

Chaque abonnement est lié à un chemin de document ("users/{uid}",
"courses/{cid}/attendance/{date}"). subscribe() retourne la fonction de
désabonnement : l'appelant DOIT l'appeler à la fermeture de la vue
(déconnexion WebSocket), sinon l'écouteur reste enregistré.
"""

import asyncio
import logging
import threading
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List

from starlette.websockets import WebSocket

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class ChangeFeed:
    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, path: str, listener: Listener) -> Callable[[], None]:
        """Enregistre un écouteur sur un chemin et retourne sa fonction de désabonnement."""
        with self._lock:
            self._listeners[path].append(listener)

        def unsubscribe() -> None:
            with self._lock:
                listeners = self._listeners.get(path)
                if listeners and listener in listeners:
                    listeners.remove(listener)
                    if not listeners:
                        del self._listeners[path]

        return unsubscribe

    def publish(self, path: str, payload: Any) -> int:
        """Pousse un nouvel état à tous les écouteurs du chemin. Retourne le nombre d'écouteurs notifiés."""
        with self._lock:
            listeners = list(self._listeners.get(path, ()))
        for listener in listeners:
            try:
                listener(payload)
            except Exception as exc:
                # Un écouteur défaillant ne doit pas empêcher les autres d'être notifiés
                logger.error("Écouteur en échec sur %s : %s", path, exc)
        return len(listeners)

    def listener_count(self, path: str) -> int:
        with self._lock:
            return len(self._listeners.get(path, ()))


change_feed = ChangeFeed()


async def stream_changes(
    websocket: WebSocket,
    path: str,
    snapshot: Callable[[], Awaitable[Any]],
    feed: ChangeFeed = change_feed,
) -> None:
    """
    Envoie l'état initial puis chaque changement publié sur `path`, jusqu'à la
    déconnexion du client. L'écouteur est retiré dans tous les cas.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    unsubscribe = feed.subscribe(path, lambda payload: loop.call_soon_threadsafe(queue.put_nowait, payload))
    receiver = asyncio.ensure_future(websocket.receive())
    try:
        await websocket.send_json(await snapshot())
        while True:
            getter = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait({receiver, getter}, return_when=asyncio.FIRST_COMPLETED)
            if receiver in done:
                getter.cancel()
                if receiver.result()["type"] == "websocket.disconnect":
                    break
                # Messages du client ignorés : le flux est en lecture seule
                receiver = asyncio.ensure_future(websocket.receive())
                continue
            await websocket.send_json(getter.result())
    finally:
        unsubscribe()
        if not receiver.done():
            receiver.cancel()
        logger.debug("Abonnement fermé : %s", path)
