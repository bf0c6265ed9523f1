"""Organizations: sub-routers with parameterized base paths.

Demonstrates:
- ``route()`` mounting a sub-router under ``/organizations/:org_id``
- Middleware that loads a resource from a base-path parameter
- Short-circuiting with a 404 before any handler runs
- Routes on the parent that never see the child's middleware

Run:
    python app.py
"""

from typing import Any

from toad import Context, Request, Response, Router, create_middleware, create_router, json_body
from toad.middleware.protocol import Next

ORGS: dict[str, dict[str, Any]] = {
    "acme": {"id": "acme", "name": "Acme Corp", "widgets": ["w1", "w2"]},
}


async def load_org(ctx: Context[Any], next: Next) -> Response:
    """Put the organization in locals, or answer 404 right here."""
    org = ORGS.get(ctx.parameters["org_id"])
    if org is None:
        return json_body({"message": "Unknown organization"}, 404)
    return await next({**ctx.locals, "org": org})


def list_widgets(ctx: Context[Any]) -> Response:
    return json_body(ctx.locals["org"]["widgets"])


def get_widget(ctx: Context[Any]) -> Response:
    widget_id = ctx.parameters["id"]
    if widget_id not in ctx.locals["org"]["widgets"]:
        return json_body({"message": "Unknown widget"}, 404)
    return json_body({"id": widget_id, "org": ctx.locals["org"]["id"]})


def create_widget(ctx: Context[Any]) -> Response:
    widgets = ctx.locals["org"]["widgets"]
    widget_id = f"w{len(widgets) + 1}"
    widgets.append(widget_id)
    return json_body({"id": widget_id}, 201)


def organization(sub: Router) -> None:
    sub.use(load_org)
    sub.get("/widgets", list_widgets)
    sub.post("/widgets", create_widget)
    sub.get("/widgets/:id", get_widget)


router = (
    create_router()
    .use(create_middleware(lambda ctx: {"api_version": "1"}))
    .get("/healthcheck", lambda ctx: json_body({"ok": True, "locals": ctx.locals}))
    .route("/organizations/:org_id", organization)
)


if __name__ == "__main__":
    for method, url in [
        ("GET", "http://localhost/healthcheck"),
        ("GET", "http://localhost/organizations/acme/widgets/w1"),
        ("GET", "http://localhost/organizations/nope/widgets"),
    ]:
        response = router.handle_sync(Request.build(method, url))
        print(method, url, response.status, response.text)
