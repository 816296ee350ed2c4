"""Documentation endpoint - links to external and generated API docs.

Read-only and static; it does not touch the session store.
"""

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter(tags=["documentation"])


class DocEntry(BaseModel):
    name: str
    url: str


_DOC_ENTRIES: list[DocEntry] = [
    DocEntry(name="Swagger", url="/api/swagger"),
    DocEntry(name="OpenAPI", url="/api/openapi.json"),
]


@router.get("/docs")
def list_docs() -> list[DocEntry]:
    """Return helpful documentation resources."""
    return _DOC_ENTRIES
