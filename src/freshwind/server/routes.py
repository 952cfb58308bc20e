"""FastAPI routes: reload WebSocket, reload script, and static files."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING

from fastapi import FastAPI, HTTPException, Request, WebSocket
from fastapi.responses import Response

from freshwind.logging import get_logger
from freshwind.server.script import inject_script, is_html, render_reload_script

if TYPE_CHECKING:
    from freshwind.config import Config
    from freshwind.server.registry import ReloadRegistry

log = get_logger("server")

NO_CACHE = {"Cache-Control": "no-store"}


def register_routes(app: FastAPI, config: Config, registry: ReloadRegistry) -> None:
    """Register the reload endpoints and the static file catch-all.

    The catch-all is registered last so it does not shadow the others.
    """
    root = Path(config.root).resolve()
    reload_route = f"/{config.reload_path}"

    @app.websocket(reload_route)
    async def reload_socket(websocket: WebSocket) -> None:
        """Hold a subscriber connection open until the browser goes away."""
        await websocket.accept()
        await registry.register(websocket)
        try:
            while True:
                # Clients have nothing to say; read text or binary frames
                # only to notice closure
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
        finally:
            await registry.unregister(websocket)

    @app.get(config.script_path)
    async def reload_script(request: Request) -> Response:
        """Serve the script that connects back to the reload socket."""
        host = request.headers.get("host") or f"{config.host}:{config.port}"
        return Response(
            render_reload_script(host, config.reload_path),
            media_type="application/javascript",
            headers=NO_CACHE,
        )

    @app.get("/{path:path}")
    def static_file(path: str) -> Response:
        """Serve a file from the watch root, injecting the script into HTML."""
        target = resolve_static(root, path)
        if target is None:
            raise HTTPException(status_code=404, detail="Not found")

        try:
            content = target.read_bytes()
        except OSError as e:
            log.warning("Cannot read %s: %s", target, e)
            raise HTTPException(status_code=404, detail="Not found") from e

        if is_html(target):
            text = content.decode("utf-8", errors="surrogateescape")
            content = inject_script(text, config.script_path).encode(
                "utf-8", errors="surrogateescape"
            )

        media_type, _ = mimetypes.guess_type(target.name)
        return Response(
            content,
            media_type=media_type or "application/octet-stream",
            headers=NO_CACHE,
        )


def resolve_static(root: Path, path: str) -> Path | None:
    """Map a URL path to a file under ``root``.

    Directories map to their index.html. Returns None for anything missing,
    invalid, or outside the root.
    """
    try:
        target = (root / path.lstrip("/")).resolve()
        if not target.is_relative_to(root):
            log.warning("Refusing path outside root: %s", path)
            return None
        if target.is_dir():
            target = target / "index.html"
        if not target.is_file():
            return None
    except (OSError, ValueError) as e:
        # Null bytes, over-long names and the like
        log.debug("Invalid static path %r: %s", path, e)
        return None
    return target
