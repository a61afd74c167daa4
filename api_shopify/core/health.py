from datetime import datetime, timezone

from aiohttp import web
from aiohttp.web_request import Request


async def check_health(request: Request):
    start_time = request.app["start_time"]
    current_time = datetime.now(timezone.utc)
    uptime_seconds = (current_time - start_time).total_seconds()
    return web.json_response(
        {
            "status": "ok",
            "version": request.app["app_version"],
            "uptime_seconds": uptime_seconds,
            "operations": len(request.app["registry"]),
        }
    )
