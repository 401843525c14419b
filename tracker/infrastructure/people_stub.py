"""
Local stand-in for the external people-info service.

Answers every well-formed request with the same static person, which is
enough to exercise user creation end to end during development.
"""

from __future__ import annotations

from aiohttp import web

STUB_PEOPLE = {
    "name": "Иван",
    "surname": "Иванов",
    "patronymic": "Иванович",
    "address": "г. Москва, ул. Ленина, д. 5, кв. 1",
}


async def info(request: web.Request) -> web.Response:
    serie = request.query.get("passportSerie", "")
    number = request.query.get("passportNumber", "")
    if not serie or not number:
        return web.json_response({"error": "Missing parameters"}, status=400)
    return web.json_response(STUB_PEOPLE)


def create_stub_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/info", info)
    return app


def run_stub(host: str, port: int) -> None:
    web.run_app(create_stub_app(), host=host, port=port)


__all__ = ["STUB_PEOPLE", "create_stub_app", "run_stub"]
